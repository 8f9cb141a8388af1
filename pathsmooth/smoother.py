import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from osqp.interface import OSQPException

from .formulation import formulate
from .kernel import INDEX_DTYPE
from .osqp_solver import OsqpSettings, OsqpSolver
from .path_spec import FemWeights, PathSpec

logger = logging.getLogger(__name__)

# Largest decision-vector length addressable by the sparse index arrays.
MAX_INDEX = int(np.iinfo(INDEX_DTYPE).max)
MIN_POINTS = 3


class SmootherState(Enum):
    UNVALIDATED = "unvalidated"
    FORMULATED = "formulated"
    SOLVED = "solved"
    FAILED = "failed"


@dataclass
class SmoothingResult:
    success: bool
    state: SmootherState
    message: str = ""
    x: Optional[np.ndarray] = None
    y: Optional[np.ndarray] = None
    info: Dict[str, float] = field(default_factory=dict)

    def points(self) -> np.ndarray:
        """Smoothed (N, 2) points, empty on failure."""
        if self.x is None or self.y is None:
            return np.zeros((0, 2), dtype=float)
        return np.column_stack((self.x, self.y))


class FemPoseDeviationSmoother:
    """
    Smooths a discrete 2-D path by solving one box-constrained QP.

    Each optimize() call validates its inputs, formulates the problem from
    scratch and runs a single solve. Nothing is kept between calls, so one
    smoother can serve any number of paths.
    """

    def __init__(
        self,
        weights: Optional[FemWeights] = None,
        settings: Optional[OsqpSettings] = None,
        solver: Optional[OsqpSolver] = None,
    ):
        self.weights = weights if weights is not None else FemWeights()
        self.solver = solver if solver is not None else OsqpSolver(settings)

    def _validate(
        self,
        ref_points: Sequence[Sequence[float]],
        x_bounds: Sequence[float],
        y_bounds: Sequence[float],
    ) -> Tuple[Optional[PathSpec], str]:
        points = np.asarray(ref_points, dtype=float)
        xb = np.asarray(x_bounds, dtype=float).reshape(-1)
        yb = np.asarray(y_bounds, dtype=float).reshape(-1)
        if points.size == 0:
            return None, "reference points empty"
        if points.ndim != 2 or points.shape[1] != 2:
            return None, f"reference points must have shape (N, 2), got {points.shape}"
        if points.shape[0] != xb.size or xb.size != yb.size:
            return None, "ref_points and bounds size not equal"
        if points.shape[0] < MIN_POINTS:
            return None, f"ref_points size smaller than {MIN_POINTS}"
        if 2 * points.shape[0] > MAX_INDEX:
            return None, "ref_points size too large"
        if not np.all(np.isfinite(points)):
            return None, "reference points must be finite"
        # NaN fails the comparison as well
        if not (np.all(xb >= 0.0) and np.all(yb >= 0.0)):
            return None, "bounds around reference points must be non-negative"
        if not self.weights.is_valid():
            return None, "weights must be finite and non-negative"
        return PathSpec(points, xb, yb), ""

    def optimize(
        self,
        ref_points: Sequence[Sequence[float]],
        x_bounds: Sequence[float],
        y_bounds: Sequence[float],
    ) -> SmoothingResult:
        """Return a SmoothingResult; x/y are only populated when state is SOLVED."""
        state = SmootherState.UNVALIDATED
        spec, error = self._validate(ref_points, x_bounds, y_bounds)
        if spec is None:
            logger.error("%s, smoother early terminates", error)
            return SmoothingResult(False, SmootherState.FAILED, error)

        problem = formulate(spec, self.weights)
        state = SmootherState.FORMULATED
        logger.debug("%s: %d points, %d variables", state.value, spec.num_points, problem.num_variables)

        try:
            solved = self.solver.solve(problem)
        except (OSQPException, ValueError, RuntimeError, MemoryError) as exc:
            message = f"solver setup failed: {exc!r}"
            logger.error(message)
            return SmoothingResult(False, SmootherState.FAILED, message)

        if not solved.success:
            message = f"Failed to find solution, status: {solved.status}"
            logger.error(message)
            return SmoothingResult(False, SmootherState.FAILED, message, info=solved.info)

        return SmoothingResult(
            True,
            SmootherState.SOLVED,
            solved.status,
            x=solved.x,
            y=solved.y,
            info=solved.info,
        )
