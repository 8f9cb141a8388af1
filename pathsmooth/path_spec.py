from dataclasses import dataclass

import numpy as np


@dataclass
class FemWeights:
    """Objective weights of the FEM pose-deviation smoother.

    smooth: second-difference (curvature proxy) penalty.
    path_length: first-difference penalty.
    ref_deviation: squared distance to the reference point.
    """

    smooth: float = 1.0e10
    path_length: float = 1.0
    ref_deviation: float = 1.0

    def is_valid(self) -> bool:
        w = np.array([self.smooth, self.path_length, self.ref_deviation], dtype=float)
        return bool(np.all(np.isfinite(w)) and w.min() >= 0.0)


@dataclass
class PathSpec:
    """
    Reference path with per-point box half-widths.
    ref_points: (N, 2) array, path order.
    x_bounds / y_bounds: (N,) non-negative half-widths around each reference point.
    """

    ref_points: np.ndarray
    x_bounds: np.ndarray
    y_bounds: np.ndarray

    @property
    def num_points(self) -> int:
        return int(self.ref_points.shape[0])

    @property
    def num_variables(self) -> int:
        return 2 * self.num_points

    @property
    def num_constraints(self) -> int:
        # one box per decision variable
        return self.num_variables
