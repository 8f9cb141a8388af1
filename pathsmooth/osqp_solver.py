import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional

import numpy as np
import osqp

from .common import deinterleave_xy
from .formulation import QpProblem

logger = logging.getLogger(__name__)

# OSQP status_val for "solved" and "solved inaccurate"
SOLVED_STATUSES = (1, 2)


@dataclass
class OsqpSettings:
    """Solver configuration. Fields left as None fall back to OSQP defaults."""

    max_iter: Optional[int] = 500
    time_limit: Optional[float] = None  # seconds
    verbose: bool = False
    scaled_termination: Optional[bool] = True
    warm_start: bool = True
    eps_abs: Optional[float] = None
    eps_rel: Optional[float] = None
    polish: Optional[bool] = None

    def as_osqp_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "verbose": self.verbose,
            "warm_starting": self.warm_start,
        }
        optional = {
            "max_iter": self.max_iter,
            "time_limit": self.time_limit,
            "scaled_termination": self.scaled_termination,
            "eps_abs": self.eps_abs,
            "eps_rel": self.eps_rel,
            "polishing": self.polish,
        }
        for key, value in optional.items():
            if value is not None:
                kwargs[key] = value
        return kwargs


@dataclass
class SolveResult:
    success: bool
    x: Optional[np.ndarray] = None
    y: Optional[np.ndarray] = None
    status: str = ""
    status_val: Optional[int] = None
    info: Dict[str, float] = field(default_factory=dict)


def is_solved(status_val: int) -> bool:
    if status_val < 0:
        return False
    return status_val in SOLVED_STATUSES


class OsqpSolver:
    """
    Runs one OSQP solve per call on a freshly set-up workspace.

    The workspace is acquired and released inside a context manager so every
    exit path (failed status, exception from setup or solve) drops every
    reference to it before solve() returns.
    """

    def __init__(
        self,
        settings: Optional[OsqpSettings] = None,
        solver_factory: Optional[Callable[[], Any]] = None,
    ):
        self.settings = settings if settings is not None else OsqpSettings()
        self.solver_factory = solver_factory if solver_factory is not None else osqp.OSQP

    @contextmanager
    def _workspace(self, problem: QpProblem) -> Iterator[Any]:
        solver = self.solver_factory()
        try:
            solver.setup(
                P=problem.P,
                q=problem.q,
                A=problem.A,
                l=problem.lower,
                u=problem.upper,
                **self.settings.as_osqp_kwargs(),
            )
            yield solver
        finally:
            del solver

    def solve(self, problem: QpProblem) -> SolveResult:
        if problem.lower.shape != problem.upper.shape:
            raise ValueError("Lower and upper bound sizes differ")
        logger.debug(
            "osqp setup: %d variables, %d constraints, %d kernel nnz",
            problem.num_variables,
            problem.num_constraints,
            problem.P.nnz,
        )
        with self._workspace(problem) as solver:
            if self.settings.warm_start:
                solver.warm_start(x=problem.warm_start)
            res = solver.solve(raise_error=False)
            del solver
            status_val = int(res.info.status_val)
            info = {
                "iterations": float(res.info.iter),
                "run_time": float(getattr(res.info, "run_time", 0.0)),
            }
            if not is_solved(status_val):
                logger.error("failed optimization status: %s", res.info.status)
                return SolveResult(False, status=str(res.info.status), status_val=status_val, info=info)
            if res.x is None or len(res.x) != problem.num_variables:
                logger.error("solver returned no usable primal solution")
                return SolveResult(False, status=str(res.info.status), status_val=status_val, info=info)
            x, y = deinterleave_xy(res.x)
        logger.debug("osqp %s after %d iterations", res.info.status, int(info["iterations"]))
        return SolveResult(True, x, y, status=str(res.info.status), status_val=status_val, info=info)
