from dataclasses import dataclass

import numpy as np
from scipy import sparse

from .common import interleave_xy
from .kernel import INDEX_DTYPE
from .path_spec import PathSpec


@dataclass
class BoxConstraint:
    """l <= A x <= u with A the identity over the decision vector."""

    A: sparse.csc_matrix
    lower: np.ndarray
    upper: np.ndarray

    @property
    def num_constraints(self) -> int:
        return int(self.A.shape[0])


def calculate_affine_constraint(spec: PathSpec) -> BoxConstraint:
    """Identity constraint matrix plus per-variable bounds reference +/- half-width."""
    n = spec.num_variables
    A = sparse.csc_matrix(
        (
            np.ones(n, dtype=float),
            np.arange(n, dtype=INDEX_DTYPE),
            np.arange(n + 1, dtype=INDEX_DTYPE),
        ),
        shape=(n, n),
    )
    reference = interleave_xy(spec.ref_points)
    half_widths = interleave_xy(np.column_stack((spec.x_bounds, spec.y_bounds)))
    return BoxConstraint(A, reference - half_widths, reference + half_widths)
