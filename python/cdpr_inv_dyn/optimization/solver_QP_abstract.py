import importlib
import logging
import time

import numpy as np
from scipy.optimize import linprog

logger = logging.getLogger(__name__)

def enum(**enums):
    return type('Enum', (), enums)

QP_status = enum(OPTIMAL=0,
                 INFEASIBLE=1,
                 MAX_ITER_REACHED=2,
                 ERROR=3,
                 SOLVER_UNAVAILABLE=4
                 );

QP_status_string = ["OPTIMAL", "INFEASIBLE", "MAX_ITER_REACHED", "ERROR", "SOLVER_UNAVAILABLE"];

QP_solver_type = enum(SCIPY_SLSQP='scipy_slsqp',
                      CVXOPT='cvxopt',
                      ACTIVE_SET_WARM_START='active_set_warm_start',
                      QPOASES='qpoases'
                      );

DEFAULT_MAX_ITER = 100;
DEFAULT_ACCURACY = 1e-6;
DEFAULT_MAX_TIME = 100.0;
CONSTRAINT_VIOLATION_THR = 1e-5;
ACTIVE_CONSTRAINT_THR = 1e-5;


class SolverUnavailableError(ValueError):
    ''' Raised when the requested QP solver type is unknown or its library cannot be loaded. '''
    status = QP_status.SOLVER_UNAVAILABLE;

    def __init__(self, message, solverType=None):
        ValueError.__init__(self, message);
        self.solverType = solverType;


class QpSolverOptions(object):
    """
    Options shared by every QP solver. Built once, when the solver is
    created, and never modified by the solver itself.
    """

    def __init__(self, maxIter=DEFAULT_MAX_ITER, verb=0, accuracy=DEFAULT_ACCURACY, maxTime=DEFAULT_MAX_TIME):
        if(int(maxIter)<=0):
            raise ValueError("Maximum number of iterations must be positive: %s" % str(maxIter));
        if(accuracy<=0.0):
            raise ValueError("Accuracy must be positive: %s" % str(accuracy));
        if(maxTime<=0.0):
            raise ValueError("Maximum time must be positive: %s" % str(maxTime));
        self.maxIter = int(maxIter);
        self.verb = int(verb);
        self.accuracy = float(accuracy);
        self.maxTime = float(maxTime);

    def __repr__(self):
        return "QpSolverOptions(maxIter=%d, verb=%d, accuracy=%g, maxTime=%g)" % (
                self.maxIter, self.verb, self.accuracy, self.maxTime);


class QpProblem(object):
    """
    Quadratic program:
         minimize    x' H x + c' x
         subject to  A_in x <= b_in
                     A_eq x  = b_eq
                     lb <= x <= ub
    Missing inequality/equality blocks are stored with zero rows.
    """

    def __init__(self, H, c, lb, ub, A_in=None, b_in=None, A_eq=None, b_eq=None):
        self.H = np.atleast_2d(np.asarray(H, dtype=float));
        n = self.H.shape[0];
        if(self.H.shape[1]!=n):
            raise ValueError("Cost matrix must be square, got shape %s" % str(self.H.shape));
        self.c = self._vector(c, n, "cost vector");
        self.lb = self._vector(lb, n, "lower bound");
        self.ub = self._vector(ub, n, "upper bound");
        (self.A_in, self.b_in) = self._block(A_in, b_in, n, "inequality");
        (self.A_eq, self.b_eq) = self._block(A_eq, b_eq, n, "equality");

    @staticmethod
    def _vector(v, n, what):
        v = np.asarray(v, dtype=float).reshape(-1);
        if(v.shape[0]!=n):
            raise ValueError("Wrong size of the %s, %d rather than %d" % (what, v.shape[0], n));
        return v;

    @staticmethod
    def _block(A, b, n, what):
        if(A is None):
            return (np.zeros((0,n)), np.zeros(0));
        A = np.asarray(A, dtype=float);
        if(A.ndim==1):
            A = A.reshape((1 if A.shape[0]>0 else 0, n));
        b = np.asarray(b, dtype=float).reshape(-1);
        if(A.shape[1]!=n):
            raise ValueError("Wrong number of columns of the %s matrix, %d rather than %d" % (what, A.shape[1], n));
        if(A.shape[0]!=b.shape[0]):
            raise ValueError("Wrong size of the %s vector, %d rather than %d" % (what, b.shape[0], A.shape[0]));
        return (A, b);

    @property
    def n(self):
        return self.H.shape[0];

    @property
    def m_in(self):
        return self.A_in.shape[0];

    @property
    def m_eq(self):
        return self.A_eq.shape[0];

    def getStackedInequalities(self):
        ''' Return (G, h) such that all inequalities and bounds read G x <= h.
            Rows are ordered as: A_in, lower bounds, upper bounds.
        '''
        n = self.n;
        G = np.vstack((self.A_in, -np.identity(n), np.identity(n)));
        h = np.concatenate((self.b_in, -self.lb, self.ub));
        return (G, h);


class SolverHint(object):
    """
    Warm-start information passed to a solver: previous solution and, for
    solvers that use it, an active-set descriptor (indices in the stacked
    inequalities of QpProblem.getStackedInequalities). Hints are never
    modified, solvers return a new one.
    """
    __slots__ = ('_f_previous', '_active_set');

    def __init__(self, f_previous=None, active_set=None):
        if(f_previous is not None):
            f_previous = np.array(f_previous, dtype=float).reshape(-1);
            f_previous.setflags(write=False);
        if(active_set is not None):
            active_set = tuple(int(i) for i in active_set);
        self._f_previous = f_previous;
        self._active_set = active_set;

    @property
    def f_previous(self):
        return self._f_previous;

    @property
    def active_set(self):
        return self._active_set;

    def isEmpty(self):
        return self._f_previous is None and self._active_set is None;

    def __repr__(self):
        return "SolverHint(f_previous=%s, active_set=%s)" % (str(self._f_previous), str(self._active_set));

SolverHint.EMPTY = SolverHint();


def computeActiveSet(x, problem, thr=ACTIVE_CONSTRAINT_THR):
    ''' Indices of the stacked inequalities that are binding at x. '''
    (G, h) = problem.getStackedInequalities();
    finite = np.isfinite(h);
    slack = np.where(finite, h - np.dot(G, x), np.inf);
    active = finite & (np.abs(slack) <= thr*np.maximum(1.0, np.abs(np.where(finite, h, 0.0))));
    return tuple(int(i) for i in np.where(active)[0]);


class SolverQPAbstract (object):
    """
    Quadratic Program solver:
         minimize    x' H x + c' x
         subject to  A_in x <= b_in
                     A_eq x  = b_eq
                     lb <= x <= ub
    Subclasses implement _solve(problem, hint) and map the exit codes of
    their numerical library onto QP_status.
    """

    supportsActiveSet = False;

    def __init__(self, name, options=None):
        self._name = name;
        self._options = QpSolverOptions() if options is None else options;
        self._verb = self._options.verb;
        self._iter = 0;
        self._qpTime = 0.0;
        self._qpStatus = None;

    def solve(self, problem, hint=SolverHint.EMPTY):
        ''' Solve the quadratic program.
            Return a tuple containing:
                primal solution
                status flag (QP_status)
                hint to use for the next call (the input hint if the solve failed)
        '''
        if(hint is None):
            hint = SolverHint.EMPTY;
        start = time.time();
        (x, status, active_set) = self._solve(problem, hint);

        if(status==QP_status.OPTIMAL):
            try:
                self.checkConstraints(x, problem);
            except ValueError as e:
                if(self._verb>0):
                    logger.warning("%s", str(e));
                status = QP_status.ERROR;
        if(status==QP_status.MAX_ITER_REACHED or status==QP_status.ERROR):
            if(not self.isFeasible(problem)):
                status = QP_status.INFEASIBLE;

        self._qpTime = time.time()-start;
        self._qpStatus = status;
        if(self._qpTime>=self._options.maxTime and self._verb>0):
            logger.warning("[%s] Max time reached %f after %d iters", self._name, self._qpTime, self._iter);

        if(status!=QP_status.OPTIMAL):
            if(self._verb>0):
                logger.warning("[%s] QP failed: %s", self._name, QP_status_string[status]);
            return (x, status, hint);
        if(not self.supportsActiveSet):
            active_set = None;
        return (x, status, SolverHint(x, active_set));

    def _solve(self, problem, hint):
        ''' Return (x, status, active_set); active_set may be None. '''
        raise NotImplementedError();

    def getInitialGuess(self, problem, hint):
        ''' Previous solution if compatible with the problem, otherwise the
            point of the box [lb, ub] closest to the middle of its finite part.
        '''
        if(hint.f_previous is not None and hint.f_previous.shape[0]==problem.n):
            return np.clip(hint.f_previous, problem.lb, problem.ub);
        lb = np.where(np.isfinite(problem.lb), problem.lb, 0.0);
        ub = np.where(np.isfinite(problem.ub), problem.ub, 0.0);
        return np.clip(0.5*(lb+ub), problem.lb, problem.ub);

    def checkConstraints(self, x, problem):
        if((x < problem.lb-CONSTRAINT_VIOLATION_THR).any()):
            raise ValueError("[%s] ERROR lower bound violated " % (self._name)+str(x)+str(problem.lb));
        if((x > problem.ub+CONSTRAINT_VIOLATION_THR).any()):
            raise ValueError("[%s] ERROR upper bound violated " % (self._name)+str(x)+str(problem.ub));
        if(problem.m_in>0):
            if((np.dot(problem.A_in,x) > problem.b_in+CONSTRAINT_VIOLATION_THR).any()):
                raise ValueError("[%s] ERROR inequality constraint violated " % (self._name)+str(np.max(np.dot(problem.A_in,x)-problem.b_in)));
        if(problem.m_eq>0):
            if((np.abs(np.dot(problem.A_eq,x)-problem.b_eq) > CONSTRAINT_VIOLATION_THR).any()):
                raise ValueError("[%s] ERROR equality constraint violated " % (self._name)+str(np.max(np.abs(np.dot(problem.A_eq,x)-problem.b_eq))));

    def isFeasible(self, problem):
        ''' Phase-1 feasibility check of the constraints with an LP.
            Return False only if the LP solver certifies infeasibility.
        '''
        bounds = [(lb if np.isfinite(lb) else None, ub if np.isfinite(ub) else None)
                  for (lb,ub) in zip(problem.lb, problem.ub)];
        A_ub = problem.A_in if problem.m_in>0 else None;
        b_ub = problem.b_in if problem.m_in>0 else None;
        A_eq = problem.A_eq if problem.m_eq>0 else None;
        b_eq = problem.b_eq if problem.m_eq>0 else None;
        try:
            res = linprog(np.zeros(problem.n), A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq,
                          bounds=bounds, method='highs');
        except ValueError as e:
            if(self._verb>0):
                logger.warning("[%s] Feasibility check failed: %s", self._name, str(e));
            return True;
        if(res.status==2):
            if(self._verb>0):
                logger.info("[%s] Constraints are infeasible: %s", self._name, res.message);
            return False;
        return True;

    def getName(self):
        return self._name;

    def getOptions(self):
        ''' Get the options the solver was created with. '''
        return self._options;

    def getMaximumIterations(self):
        ''' Get the maximum number of iterations performed by the solver. '''
        return self._options.maxIter;

    def getIterationNumber(self):
        ''' Get the number of iterations performed by the last solve. '''
        return self._iter;

    def getQpTime(self):
        ''' Get the time taken by the last QP computation (in seconds). '''
        return self._qpTime;

    def getStatus(self):
        return self._qpStatus;


_SOLVER_REGISTRY = {
    QP_solver_type.SCIPY_SLSQP:             ('solver_QP_scipy', 'SolverQPScipy'),
    QP_solver_type.CVXOPT:                  ('solver_QP_cvxopt', 'SolverQPCvxopt'),
    QP_solver_type.ACTIVE_SET_WARM_START:   ('solver_QP_active_set', 'SolverQPActiveSet'),
    QP_solver_type.QPOASES:                 ('solver_QP_qpoases', 'SolverQPQpOases'),
};

def getSolverTypes():
    return tuple(sorted(_SOLVER_REGISTRY.keys()));

def getNewSolver(solverType, name, options=None):
    ''' Create a new QP solver of the specified type.
       @param solverType Type of QP solver (QP_solver_type).
       @return The new solver.
    '''
    if(solverType not in _SOLVER_REGISTRY):
        raise SolverUnavailableError("[%s] Unrecognized solver type: %s" % (name, solverType), solverType);
    (module_name, class_name) = _SOLVER_REGISTRY[solverType];
    try:
        module = importlib.import_module('.'+module_name, __package__);
    except ImportError as e:
        raise SolverUnavailableError("[%s] Solver type %s is not available: %s" % (name, solverType, str(e)), solverType);
    return getattr(module, class_name)(name, options);
