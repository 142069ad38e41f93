from .solver_QP_abstract import QP_status, QP_status_string, QP_solver_type
from .solver_QP_abstract import QpProblem, QpSolverOptions, SolverHint, SolverQPAbstract
from .solver_QP_abstract import SolverUnavailableError, getNewSolver, getSolverTypes
