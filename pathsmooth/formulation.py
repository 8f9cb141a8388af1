from dataclasses import dataclass

import numpy as np
from scipy import sparse

from .common import interleave_xy
from .constraints import calculate_affine_constraint
from .kernel import calculate_kernel
from .path_spec import FemWeights, PathSpec


@dataclass
class QpProblem:
    P: sparse.csc_matrix
    q: np.ndarray
    A: sparse.csc_matrix
    lower: np.ndarray
    upper: np.ndarray
    warm_start: np.ndarray

    @property
    def num_variables(self) -> int:
        return int(self.P.shape[1])

    @property
    def num_constraints(self) -> int:
        return int(self.A.shape[0])


def calculate_offset(spec: PathSpec, weights: FemWeights) -> np.ndarray:
    """
    Linear term q of the objective.

    Expanding w_d * (x - r)^2 gives w_d x^2 - 2 w_d r x, so each entry is the
    matching reference coordinate scaled by -2 w_d.
    """
    return -2.0 * weights.ref_deviation * interleave_xy(spec.ref_points)


def primal_warm_start(spec: PathSpec) -> np.ndarray:
    return interleave_xy(spec.ref_points).copy()


def formulate(spec: PathSpec, weights: FemWeights) -> QpProblem:
    box = calculate_affine_constraint(spec)
    return QpProblem(
        P=calculate_kernel(spec.num_points, weights),
        q=calculate_offset(spec, weights),
        A=box.A,
        lower=box.lower,
        upper=box.upper,
        warm_start=primal_warm_start(spec),
    )
