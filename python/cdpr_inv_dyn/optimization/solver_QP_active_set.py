import logging

import numpy as np

from .solver_QP_abstract import QP_status, CONSTRAINT_VIOLATION_THR, computeActiveSet
from .solver_QP_cvxopt import SolverQPCvxopt

logger = logging.getLogger(__name__)

class SolverQPActiveSet (SolverQPCvxopt):
    """
    Quadratic Program solver with an active-set warm start:
      minimize    x' H x + c' x
     subject to  A_in x <= b_in
                 A_eq x  = b_eq
                 lb <= x <= ub
    The inequalities that were active at the previous solution are imposed
    as equalities and the resulting KKT system is solved directly. If the
    solution satisfies all the constraints and the multipliers of the active
    inequalities are non negative it is optimal, otherwise the problem is
    solved from scratch with the interior-point method. The active set of
    the solution is returned in the hint. A variable whose lower and upper
    bounds coincide is imposed once, as an equality.
    """

    supportsActiveSet = True;

    def __init__(self, name, options=None):
        SolverQPCvxopt.__init__(self, name, options);
        self._warmStartHit = False;

    def _solve(self, problem, hint):
        self._warmStartHit = False;
        if(hint.active_set is not None):
            x = self.solveWithActiveSet(problem, hint.active_set);
            if(x is not None):
                self._warmStartHit = True;
                self._iter = 1;
                return (x, QP_status.OPTIMAL, computeActiveSet(x, problem));
            if(self._verb>1):
                logger.info("[%s] Previous active set is not optimal, solve from scratch", self._name);

        (x, status) = self._solveInteriorPoint(problem);
        if(status!=QP_status.OPTIMAL):
            return (x, status, None);
        return (x, status, computeActiveSet(x, problem));

    def solveWithActiveSet(self, problem, active_set):
        ''' Solve the QP imposing the given active set as equalities.
            Return the solution if it is optimal, None otherwise.
        '''
        n = problem.n;
        (G, h) = problem.getStackedInequalities();
        W = [i for i in active_set if 0<=i<G.shape[0] and np.isfinite(h[i])];
        if(len(W)!=len(active_set)):
            return None;
        # a cable with lb==ub has both bound rows active: keep only the lower
        # bound row, it acts as an equality and its multiplier has free sign
        m_in = problem.m_in;
        fixed = [i for i in W if m_in<=i<m_in+n and (i+n) in W and problem.lb[i-m_in]==problem.ub[i-m_in]];
        W = [i for i in W if i-n not in fixed];
        G_W = G[W,:];
        m_eq = problem.m_eq;
        m_W = len(W);

        K = np.zeros((n+m_eq+m_W, n+m_eq+m_W));
        K[:n,:n] = problem.H + problem.H.T;
        K[:n,n:n+m_eq] = problem.A_eq.T;
        K[:n,n+m_eq:] = G_W.T;
        K[n:n+m_eq,:n] = problem.A_eq;
        K[n+m_eq:,:n] = G_W;
        rhs = np.concatenate((-problem.c, problem.b_eq, h[W]));
        try:
            sol = np.linalg.solve(K, rhs);
        except np.linalg.LinAlgError:
            if(self._verb>1):
                logger.info("[%s] Singular KKT matrix for active set %s", self._name, str(W));
            return None;
        if(not np.all(np.isfinite(sol))):
            return None;

        x = sol[:n];
        mu = sol[n+m_eq:];
        is_ineq = np.array([i not in fixed for i in W], dtype=bool);
        if((mu[is_ineq] < -CONSTRAINT_VIOLATION_THR).any()):
            return None;
        if((np.dot(G, x) > h+CONSTRAINT_VIOLATION_THR).any()):
            return None;
        if(m_eq>0 and (np.abs(np.dot(problem.A_eq, x)-problem.b_eq) > CONSTRAINT_VIOLATION_THR).any()):
            return None;
        return x;

    def getWarmStartHit(self):
        ''' True if the last solve was solved by the previous active set. '''
        return self._warmStartHit;
