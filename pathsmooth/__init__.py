"""
Discrete-point path smoothing for motion-control consumers.
Exports:
- FemPoseDeviationSmoother: box-constrained QP smoother solved with OSQP
- smooth_path / compute_path_profile: convenience wrappers around it
"""

from .path_spec import FemWeights, PathSpec
from .kernel import calculate_kernel
from .constraints import BoxConstraint, calculate_affine_constraint
from .formulation import QpProblem, calculate_offset, formulate, primal_warm_start
from .osqp_solver import OsqpSettings, OsqpSolver, SolveResult
from .smoother import FemPoseDeviationSmoother, SmootherState, SmoothingResult
from .postprocess import PathProfile, compute_path_profile, smooth_path

__all__ = [
    "FemWeights",
    "PathSpec",
    "calculate_kernel",
    "BoxConstraint",
    "calculate_affine_constraint",
    "QpProblem",
    "calculate_offset",
    "formulate",
    "primal_warm_start",
    "OsqpSettings",
    "OsqpSolver",
    "SolveResult",
    "FemPoseDeviationSmoother",
    "SmootherState",
    "SmoothingResult",
    "PathProfile",
    "compute_path_profile",
    "smooth_path",
]
