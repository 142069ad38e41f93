import logging

from .system_dynamics import DynamicsSnapshot
from .objectives import IDObjectiveAbstract, IDObjectiveMinQuadCableForce
from .objectives import IDObjectiveMinLinCableForce, IDObjectiveMinForceDeviation
from .constraints import IDConstraintLinear, IDConstraintFixedLinear
from .constraints import IDConstraintCableForceSum, IDConstraintCableForceRate
from .abstract_solver import IDSolverAbstract, IDResult, INVALID_FORCE
from .abstract_solver import ID_exit_type, ID_exit_type_string, ID_hint_policy
from .standard_qp_solver import IDSolverQuadProg
from .simulator import InverseDynamicsSimulator
from .optimization import QP_solver_type, QpSolverOptions, SolverHint, SolverUnavailableError

logging.getLogger(__name__).addHandler(logging.NullHandler())
