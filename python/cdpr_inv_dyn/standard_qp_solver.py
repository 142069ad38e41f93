import logging

import numpy as np

from .abstract_solver import IDSolverAbstract, INVALID_FORCE, ID_exit_type, ID_exit_type_string
from .abstract_solver import ID_hint_policy, QP_STATUS_TO_ID_EXIT
from .optimization.solver_QP_abstract import QpProblem, SolverHint, getNewSolver

logger = logging.getLogger(__name__)

class IDSolverQuadProg (IDSolverAbstract):
    """
    Inverse dynamics solver for problems in the Quadratic Program form:
        minimize    f' A_obj f + b_obj' f
        subject to  A_eq f = b_eq           (equations of motion)
                    A_ineq f <= b_ineq      (registered linear constraints)
                    fmin <= f <= fmax
    Only a quadratic objective and linear constraints can be used. The QP
    solver type is chosen at construction. The solution of the last
    successful resolve (and its active set, if the solver returns one) is
    used to warm start the next resolve.
    """

    def __init__(self, objective, qp_solver_type, options=None,
                 hint_policy=ID_hint_policy.RETAIN_LAST_GOOD, name="IDSolverQuadProg"):
        verb = 0 if options is None else options.verb;
        IDSolverAbstract.__init__(self, name, verb);
        if(hint_policy not in (ID_hint_policy.RETAIN_LAST_GOOD, ID_hint_policy.RESET_ON_FAILURE)):
            raise ValueError("[%s] Unrecognized hint policy: %s" % (name, hint_policy));
        self.objective = objective;
        self.constraints = [];
        self.hint_policy = hint_policy;
        self._hint = SolverHint.EMPTY;
        self._numCables = -1;
        self.setQpSolverType(qp_solver_type, options);

    def setQpSolverType(self, qp_solver_type, options=None):
        ''' Create the QP solver of the given type. The warm-start hint is discarded. '''
        self._qpSolver = getNewSolver(qp_solver_type, self.name, options);
        self.qp_solver_type = qp_solver_type;
        self.options = self._qpSolver.getOptions();
        self.verb = self.options.verb;
        self.reset();

    def reset(self):
        ''' Discard the warm-start hint: the next resolve starts cold. '''
        self._hint = SolverHint.EMPTY;

    def isWarm(self):
        return self._hint.f_previous is not None;

    def getHint(self):
        return self._hint;

    def getQpSolver(self):
        return self._qpSolver;

    def addConstraint(self, linConstraint):
        ''' Add a linear constraint to the QP problem (appended after the existing ones). '''
        self.constraints.append(linConstraint);

    def getConstraints(self):
        return tuple(self.constraints);

    def resolveFunction(self, dynamics):
        # Form the linear EoM constraint
        # M q_ddot + C + G + w_e = -L^T f
        (A_eq, b_eq) = self.GetEoMConstraints(dynamics);
        # Form the lower and upper bound force constraints
        fmin = dynamics.forcesMin;
        fmax = dynamics.forcesMax;
        n = dynamics.numCables;
        if(n!=self._numCables):
            if(self.isWarm() and self.verb>0):
                logger.info("[%s] Number of cables changed from %d to %d, discard warm start", self.name, self._numCables, n);
            self._hint = SolverHint.EMPTY;
            self._numCables = n;

        (A_obj, b_obj) = self.objective.updateObjective(dynamics);
        (A_ineq, b_ineq) = self.stackConstraints(dynamics);

        problem = QpProblem(A_obj, b_obj, fmin, fmax, A_ineq, b_ineq, A_eq, b_eq);
        (cable_forces, qp_status, hint) = self._qpSolver.solve(problem, self._hint);
        id_exit_type = QP_STATUS_TO_ID_EXIT[qp_status];

        # If there is an error, cable forces take the invalid value and Q_opt is infinity
        if(id_exit_type!=ID_exit_type.NO_ERROR):
            cable_forces = INVALID_FORCE*np.ones(n);
            Q_opt = np.inf;
            if(self.hint_policy==ID_hint_policy.RESET_ON_FAILURE):
                self._hint = SolverHint.EMPTY;
            if(self.verb>0):
                logger.warning("[%s] Resolve failed: %s", self.name, ID_exit_type_string[id_exit_type]);
        else:
            Q_opt = self.objective.evaluateFunction(cable_forces);
            self._hint = hint;
        return (cable_forces, Q_opt, id_exit_type);

    def stackConstraints(self, dynamics):
        ''' Stack the blocks of all the registered constraints, in registration order. '''
        n = dynamics.numCables;
        A_ineq = [np.zeros((0,n))];
        b_ineq = [np.zeros(0)];
        for c in self.constraints:
            (A, b) = c.updateConstraint(dynamics);
            A = np.atleast_2d(np.asarray(A, dtype=float));
            b = np.asarray(b, dtype=float).reshape(-1);
            if(A.shape[0]==0):
                continue;
            if(A.shape[1]!=n):
                raise ValueError("[%s] Constraint %s has %d columns rather than %d" % (
                                  self.name, getattr(c, 'name', str(c)), A.shape[1], n));
            if(A.shape[0]!=b.shape[0]):
                raise ValueError("[%s] Constraint %s has %d rows but %d bounds" % (
                                  self.name, getattr(c, 'name', str(c)), A.shape[0], b.shape[0]));
            A_ineq.append(A);
            b_ineq.append(b);
        return (np.vstack(A_ineq), np.concatenate(b_ineq));
