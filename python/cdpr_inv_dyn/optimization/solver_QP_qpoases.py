import logging

import numpy as np
from qpoases import PySQProblem as SQProblem
from qpoases import PyOptions as Options
from qpoases import PyPrintLevel as PrintLevel
from qpoases import PyReturnValue

from . import solver_QP_abstract
from .solver_QP_abstract import QP_status

logger = logging.getLogger(__name__)

QPOASES_INFTY = 1e20;

# return codes reported in the diagnostics, by name
_QPOASES_RETURN_NAMES = dict((getattr(PyReturnValue, name), name) for name in
                             ('MAX_NWSR_REACHED', 'HOTSTART_STOPPED_INFEASIBILITY', 'HOTSTART_STOPPED_UNBOUNDEDNESS',
                              'HOTSTART_FAILED_AS_QP_NOT_INITIALISED', 'INIT_FAILED_HOTSTART',
                              'INIT_FAILED_INFEASIBILITY', 'INIT_FAILED_UNBOUNDEDNESS',
                              'STEPDIRECTION_FAILED_TQ', 'STEPDIRECTION_FAILED_CHOLESKY', 'UNKNOWN_BUG')
                             if hasattr(PyReturnValue, name));

def qpOasesSolverMsg(imode):
    ''' Name of a qpOASES return code, the number itself if it is not known. '''
    return _QPOASES_RETURN_NAMES.get(imode, str(imode));


class SolverQPQpOases (solver_QP_abstract.SolverQPAbstract):
    """
    Quadratic Program solver based on the online active-set method of qpOASES:
      minimize    x' H x + c' x
     subject to  A_in x <= b_in
                 A_eq x  = b_eq
                 lb <= x <= ub
    When the caller provides a previous solution and the problem size did not
    change, the solver is hot-started from the active set of its last solve.
    """

    def __init__(self, name, options=None):
        solver_QP_abstract.SolverQPAbstract.__init__(self, name, options);
        self._qpOptions      = Options();
        self._qpOptions.setToReliable();
        if(self._verb<=1):
            self._qpOptions.printLevel  = PrintLevel.NONE;
        elif(self._verb==2):
            self._qpOptions.printLevel  = PrintLevel.LOW;
        elif(self._verb==3):
            self._qpOptions.printLevel  = PrintLevel.MEDIUM;
        elif(self._verb>3):
            self._qpOptions.printLevel  = PrintLevel.DEBUG_ITER;
        self._qpOptions.enableRegularisation = True;
        self._qpOptions.enableEqualities = True;
        self._n              = -1;
        self._m_con          = -1;
        self._initialized    = False;
        self._qpOasesSolver  = None;

    def reset(self):
        ''' Reset the solver status so that, at the next call of solve(),
            no hot start is used.
        '''
        self._initialized    = False;

    def _solve(self, problem, hint):
        n = problem.n;
        m_con = problem.m_in + problem.m_eq;
        A_con = np.vstack((problem.A_in, problem.A_eq));
        lb_con = np.concatenate((-QPOASES_INFTY*np.ones(problem.m_in), problem.b_eq));
        ub_con = np.concatenate((problem.b_in, problem.b_eq));
        lb = np.maximum(problem.lb, -QPOASES_INFTY);
        ub = np.minimum(problem.ub, QPOASES_INFTY);

        if(n != self._n or m_con != self._m_con):
            self._qpOasesSolver = SQProblem(n, m_con);
            self._qpOasesSolver.setOptions(self._qpOptions);
            self._n = n;
            self._m_con = m_con;
            self._initialized = False;

        Hess = np.ascontiguousarray(problem.H + problem.H.T);
        g = np.ascontiguousarray(problem.c);
        A_con = np.ascontiguousarray(A_con);
        maxActiveSetIter    = np.array([self._options.maxIter]);
        maxComputationTime  = np.array([self._options.maxTime]);

        if(self._initialized and hint.f_previous is not None):
            imode = self._qpOasesSolver.hotstart(Hess, g, A_con, lb, ub, lb_con, ub_con,
                                                 maxActiveSetIter, maxComputationTime);
        else:
            imode = self._qpOasesSolver.init(Hess, g, A_con, lb, ub, lb_con, ub_con,
                                             maxActiveSetIter, maxComputationTime);
        self._iter = 1+int(maxActiveSetIter[0]);

        x = np.zeros(n);
        if(imode==0):
            self._initialized = True;
            self._qpOasesSolver.getPrimalSolution(x);
            return (x, QP_status.OPTIMAL, None);

        if(imode==PyReturnValue.HOTSTART_STOPPED_INFEASIBILITY or
           imode==PyReturnValue.INIT_FAILED_INFEASIBILITY):
            status = QP_status.INFEASIBLE;
        elif(imode==PyReturnValue.MAX_NWSR_REACHED):
            status = QP_status.MAX_ITER_REACHED;
        else:
            status = QP_status.ERROR;
        self.reset();
        if(self._verb>0):
            logger.warning("[%s] ERROR Qp oases %s", self._name, qpOasesSolverMsg(imode));
        return (x, status, None);
