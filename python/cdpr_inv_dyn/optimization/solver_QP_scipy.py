import logging

import numpy as np
from scipy.optimize import minimize

from . import solver_QP_abstract
from .solver_QP_abstract import QP_status

logger = logging.getLogger(__name__)

class SolverQPScipy (solver_QP_abstract.SolverQPAbstract):
    """
    Quadratic Program solver based on scipy's SLSQP:
      minimize    x' H x + c' x
     subject to  A_in x <= b_in
                 A_eq x  = b_eq
                 lb <= x <= ub
    The previous solution, if any, is used as initial guess.
    """

    ''' Exit modes of SLSQP:
        -1 : Gradient evaluation required (g & a)
         0 : Optimization terminated successfully.
         1 : Function evaluation required (f & c)
         2 : More equality constraints than independent variables
         3 : More than 3*n iterations in LSQ subproblem
         4 : Inequality constraints incompatible
         5 : Singular matrix E in LSQ subproblem
         6 : Singular matrix C in LSQ subproblem
         7 : Rank-deficient equality constraint subproblem HFTI
         8 : Positive directional derivative for linesearch
         9 : Iteration limit exceeded
    '''
    SLSQP_STATUS = {0: QP_status.OPTIMAL,
                    4: QP_status.INFEASIBLE,
                    9: QP_status.MAX_ITER_REACHED};

    def __init__(self, name, options=None):
        solver_QP_abstract.SolverQPAbstract.__init__(self, name, options);

    def _solve(self, problem, hint):
        H = problem.H + problem.H.T;
        c = problem.c;

        def f_cost(x):
            return 0.5*np.dot(x, np.dot(H, x)) + np.dot(c, x);

        def f_cost_grad(x):
            return np.dot(H, x) + c;

        constraints = [];
        if(problem.m_eq>0):
            constraints.append({'type': 'eq',
                                'fun': lambda x: np.dot(problem.A_eq, x) - problem.b_eq,
                                'jac': lambda x: problem.A_eq});
        if(problem.m_in>0):
            constraints.append({'type': 'ineq',
                                'fun': lambda x: problem.b_in - np.dot(problem.A_in, x),
                                'jac': lambda x: -problem.A_in});
        bounds = [(lb if np.isfinite(lb) else None, ub if np.isfinite(ub) else None)
                  for (lb,ub) in zip(problem.lb, problem.ub)];

        x0 = self.getInitialGuess(problem, hint);
        try:
            res = minimize(f_cost, x0, jac=f_cost_grad, method='SLSQP', bounds=bounds,
                           constraints=constraints,
                           options={'maxiter': self._options.maxIter,
                                    'ftol': 1e-2*self._options.accuracy,
                                    'disp': self._verb>1});
        except (ValueError, ArithmeticError, np.linalg.LinAlgError) as e:
            if(self._verb>0):
                logger.warning("[%s] ERROR SLSQP raised %s", self._name, str(e));
            self._iter = 0;
            return (np.copy(x0), QP_status.ERROR, None);

        self._iter = int(res.nit);
        status = self.SLSQP_STATUS.get(int(res.status), QP_status.ERROR);
        if(status!=QP_status.OPTIMAL and self._verb>0 and status!=QP_status.MAX_ITER_REACHED):
            logger.warning("[%s] *** ERROR *** %s", self._name, res.message);
        elif(status==QP_status.MAX_ITER_REACHED and self._verb>1):
            logger.info("[%s] Max number of iterations reached %d", self._name, self._iter);
        return (np.asarray(res.x, dtype=float), status, None);
