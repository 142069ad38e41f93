import logging

import numpy as np
from cvxopt import matrix, solvers

from . import solver_QP_abstract
from .solver_QP_abstract import QP_status

logger = logging.getLogger(__name__)

class SolverQPCvxopt (solver_QP_abstract.SolverQPAbstract):
    """
    Quadratic Program solver based on the interior-point method of cvxopt:
      minimize    x' H x + c' x
     subject to  A_in x <= b_in
                 A_eq x  = b_eq
                 lb <= x <= ub
    Bounds are converted into inequalities, infinite bounds are dropped.
    """

    def __init__(self, name, options=None):
        solver_QP_abstract.SolverQPAbstract.__init__(self, name, options);
        # cvxopt minimizes 0.5 x' P x + q' x
        self._cvxoptOptions = {'show_progress': self._verb>1,
                               'maxiters': self._options.maxIter,
                               'abstol': 1e-2*self._options.accuracy,
                               'reltol': 1e-2*self._options.accuracy,
                               'feastol': 1e-2*self._options.accuracy};
    def _solve(self, problem, hint):
        (x, status) = self._solveInteriorPoint(problem);
        return (x, status, None);

    def _solveInteriorPoint(self, problem):
        ''' Always starts from the default point of cvxopt: a primal-only
            initial guess makes the interior-point method slower.
        '''
        n = problem.n;
        has_ub = np.isfinite(problem.ub);
        has_lb = np.isfinite(problem.lb);
        I = np.identity(n);
        G = np.vstack((problem.A_in, I[has_ub,:], -I[has_lb,:]));
        h = np.concatenate((problem.b_in, problem.ub[has_ub], -problem.lb[has_lb]));

        P_cvx = matrix(np.ascontiguousarray(problem.H + problem.H.T));
        q_cvx = matrix(np.ascontiguousarray(problem.c));
        G_cvx = matrix(np.ascontiguousarray(G)) if G.shape[0]>0 else None;
        h_cvx = matrix(np.ascontiguousarray(h)) if G.shape[0]>0 else None;
        A_cvx = matrix(np.ascontiguousarray(problem.A_eq)) if problem.m_eq>0 else None;
        b_cvx = matrix(np.ascontiguousarray(problem.b_eq)) if problem.m_eq>0 else None;

        try:
            res = solvers.qp(P_cvx, q_cvx, G_cvx, h_cvx, A_cvx, b_cvx,
                             options=self._cvxoptOptions);
        except (ValueError, ArithmeticError) as e:
            # rank deficient equalities or singular KKT system
            if(self._verb>0):
                logger.warning("[%s] ERROR cvxopt QP %s", self._name, str(e));
            self._iter = 0;
            return (np.zeros(n), QP_status.ERROR);

        self._iter = int(res['iterations']);
        x = np.zeros(n) if res['x'] is None else np.array(res['x']).reshape(n);
        if(res['status']=='optimal'):
            return (x, QP_status.OPTIMAL);
        if(res['status']=='primal infeasible'):
            status = QP_status.INFEASIBLE;
        elif(self._iter>=self._options.maxIter):
            status = QP_status.MAX_ITER_REACHED;
        else:
            status = QP_status.ERROR;
        if(self._verb>0):
            logger.warning("[%s] ERROR cvxopt QP %s after %d iters", self._name, res['status'], self._iter);
        return (x, status);
