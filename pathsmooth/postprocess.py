from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .osqp_solver import OsqpSettings
from .path_spec import FemWeights
from .smoother import FemPoseDeviationSmoother

BoundLike = Union[float, Sequence[float], np.ndarray]


@dataclass
class PathProfile:
    headings: np.ndarray
    accumulated_s: np.ndarray
    kappas: np.ndarray
    dkappas: np.ndarray


def _expand_bounds(bound: BoundLike, num_points: int) -> np.ndarray:
    arr = np.asarray(bound, dtype=float)
    if arr.ndim == 0:
        return np.full(num_points, float(arr))
    return arr.reshape(-1)


def compute_path_profile(xy: np.ndarray) -> PathProfile:
    """
    Heading, arc length, curvature and curvature rate along a discrete path.

    Derivatives are taken w.r.t. point index (central differences inside,
    one-sided at both ends), so curvature is parametrisation independent
    while dkappa is rescaled by the local arc-length step.
    """
    xy = np.asarray(xy, dtype=float)
    if xy.ndim != 2 or xy.shape[0] < 2 or xy.shape[1] != 2:
        raise ValueError("Path profile needs at least 2 points of shape (N, 2)")
    x = xy[:, 0]
    y = xy[:, 1]
    dx = np.gradient(x)
    dy = np.gradient(y)
    headings = np.arctan2(dy, dx)

    seg = np.hypot(np.diff(x), np.diff(y))
    accumulated_s = np.concatenate(([0.0], np.cumsum(seg)))

    if xy.shape[0] < 3:
        zeros = np.zeros(xy.shape[0], dtype=float)
        return PathProfile(headings, accumulated_s, zeros, zeros.copy())

    ddx = np.gradient(dx)
    ddy = np.gradient(dy)
    speed_sq = dx * dx + dy * dy
    denom = np.power(np.maximum(speed_sq, 1e-18), 1.5)
    kappas = (dx * ddy - dy * ddx) / denom
    ds = np.maximum(np.gradient(accumulated_s), 1e-9)
    dkappas = np.gradient(kappas) / ds
    return PathProfile(headings, accumulated_s, kappas, dkappas)


def smooth_path(
    points: Sequence[Sequence[float]],
    x_bound: BoundLike,
    y_bound: Optional[BoundLike] = None,
    weights: Optional[FemWeights] = None,
    settings: Optional[OsqpSettings] = None,
    normalize: bool = True,
    smoother: Optional[FemPoseDeviationSmoother] = None,
) -> Tuple[np.ndarray, Dict[str, object]]:
    """
    Smooth a raw path and return (smoothed_xy, info). Empty array on failure.

    Bounds may be scalars (same box for every point) or per-point sequences;
    y_bound defaults to x_bound. With normalize the path is shifted so its first
    point is the origin before solving, which keeps the QP well conditioned for
    map-frame coordinates, and shifted back afterwards.
    """
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        pts = pts.reshape(0, 2)
    num_points = pts.shape[0]
    xb = _expand_bounds(x_bound, num_points)
    yb = _expand_bounds(x_bound if y_bound is None else y_bound, num_points)

    shift = None
    if normalize and pts.ndim == 2 and num_points > 0:
        shift = pts[0].copy()
    if smoother is None:
        smoother = FemPoseDeviationSmoother(weights, settings)
    result = smoother.optimize(pts if shift is None else pts - shift, xb, yb)

    info: Dict[str, object] = {
        "success": result.success,
        "state": result.state.value,
        "message": result.message,
    }
    info.update(result.info)
    if not result.success:
        return np.zeros((0, 2), dtype=float), info
    smoothed = result.points()
    if shift is not None:
        smoothed = smoothed + shift
    info["max_deviation"] = float(np.max(np.hypot(*(smoothed - pts).T)))
    return smoothed, info
