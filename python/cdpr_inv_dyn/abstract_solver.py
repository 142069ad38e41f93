import logging
import time

import numpy as np

from .optimization.solver_QP_abstract import enum, QP_status

logger = logging.getLogger(__name__)

INVALID_FORCE = -1.0;    # value of the cable forces when the solver fails

ID_exit_type = enum(NO_ERROR=0,
                    INFEASIBLE=1,
                    NUMERICAL_FAILURE=2,
                    ITERATION_LIMIT_EXCEEDED=3,
                    SOLVER_UNAVAILABLE=4
                    );

ID_exit_type_string = ["NO_ERROR", "INFEASIBLE", "NUMERICAL_FAILURE", "ITERATION_LIMIT_EXCEEDED", "SOLVER_UNAVAILABLE"];

''' What to do with the warm-start hint when a resolve fails:
    RETAIN_LAST_GOOD: keep the hint of the last successful resolve
    RESET_ON_FAILURE: drop the hint, the next resolve starts cold
'''
ID_hint_policy = enum(RETAIN_LAST_GOOD='retain_last_good',
                      RESET_ON_FAILURE='reset_on_failure');

QP_STATUS_TO_ID_EXIT = {QP_status.OPTIMAL:            ID_exit_type.NO_ERROR,
                        QP_status.INFEASIBLE:         ID_exit_type.INFEASIBLE,
                        QP_status.ERROR:              ID_exit_type.NUMERICAL_FAILURE,
                        QP_status.MAX_ITER_REACHED:   ID_exit_type.ITERATION_LIMIT_EXCEEDED,
                        QP_status.SOLVER_UNAVAILABLE: ID_exit_type.SOLVER_UNAVAILABLE};


class IDResult (object):
    ''' Output of one inverse dynamics resolve. Unpacks as (forces, cost, exitType). '''
    __slots__ = ('forces', 'cost', 'exitType');

    def __init__(self, forces, cost, exitType):
        self.forces = forces;
        self.cost = cost;
        self.exitType = exitType;

    def isSuccess(self):
        return self.exitType==ID_exit_type.NO_ERROR;

    def __iter__(self):
        return iter((self.forces, self.cost, self.exitType));

    def __repr__(self):
        return "IDResult(forces=%s, cost=%g, exitType=%s)" % (
                str(self.forces), self.cost, ID_exit_type_string[self.exitType]);


class IDSolverAbstract (object):
    """
    Abstract inverse dynamics solver for cable-driven parallel robots:
    given the equations of motion
        M q_ddot + C + G + w_e = -L^T f
    find the cable forces f. Subclasses implement resolveFunction(dynamics).
    """

    def __init__(self, name="IDSolverAbstract", verb=0):
        self.name = name;
        self.verb = verb;
        self.f_previous = None;     # forces returned by the last resolve (valid or not)
        self.Q_opt = np.inf;
        self.exitType = None;
        self.computationTime = 0.0;

    def resolve(self, dynamics):
        ''' Resolve the cable forces for the given dynamics snapshot.
            Return an IDResult with the forces, the optimal cost and the exit type.
        '''
        start = time.time();
        (cable_forces, Q_opt, exitType) = self.resolveFunction(dynamics);
        self.computationTime = time.time()-start;
        self.f_previous = cable_forces;
        self.Q_opt = Q_opt;
        self.exitType = exitType;
        if(self.verb>1):
            logger.info("[%s] Resolved in %.6f s, exit %s, cost %g", self.name, self.computationTime,
                        ID_exit_type_string[exitType], Q_opt);
        return IDResult(cable_forces, Q_opt, exitType);

    def resolveFunction(self, dynamics):
        raise NotImplementedError();

    @staticmethod
    def GetEoMConstraints(dynamics):
        ''' Linear equality constraint A_eq f = b_eq from the equations of motion:
            M q_ddot + C + G + w_e = -L^T f
        '''
        A_eq = -dynamics.L.T;
        b_eq = np.dot(dynamics.M, dynamics.q_ddot) + dynamics.C + dynamics.G + dynamics.w_e;
        return (A_eq, b_eq);
