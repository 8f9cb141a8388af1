from typing import List, Tuple

import numpy as np
from scipy import sparse

from .path_spec import FemWeights

# Discrete second difference x[k] - 2 x[k+1] + x[k+2]
SECOND_DIFF_STENCIL = (1.0, -2.0, 1.0)
INDEX_DTYPE = np.int64


def _second_diff_product(point: int, offset: int, num_points: int) -> float:
    """
    Coefficient of x[point - offset] * x[point] in sum_k (stencil . x[k:k+3])^2,
    halved for off-diagonal pairs (upper-triangle convention).
    Only windows k that contain both points contribute, which is what makes the
    first/last two points differ from the interior.
    """
    first = max(0, point - 2)
    last = min(point - offset, num_points - 3)
    total = 0.0
    for k in range(first, last + 1):
        total += SECOND_DIFF_STENCIL[point - offset - k] * SECOND_DIFF_STENCIL[point - k]
    return total


def _first_diff_product(point: int, offset: int, num_points: int) -> float:
    if offset == 0:
        return float(point > 0) + float(point < num_points - 1)
    if offset == 1:
        return -1.0
    return 0.0


def point_coefficients(point: int, num_points: int, weights: FemWeights) -> List[Tuple[int, float]]:
    """
    Algebraic (undoubled) kernel entries of one point on one axis.
    Returns (points_back, value) pairs ordered by ascending row, i.e. two back,
    one back, then the diagonal. Entries are kept even when their value is zero.
    """
    coeffs = []
    for offset in (2, 1, 0):
        if point - offset < 0:
            continue
        value = (
            weights.smooth * _second_diff_product(point, offset, num_points)
            + weights.path_length * _first_diff_product(point, offset, num_points)
        )
        if offset == 0:
            value += weights.ref_deviation
        coeffs.append((offset, value))
    return coeffs


def calculate_kernel(num_points: int, weights: FemWeights) -> sparse.csc_matrix:
    """
    Build P for 0.5 x^T P x + q^T x over the interleaved (x0, y0, x1, y1, ...) vector.

    Only the upper triangle is stored, in CSC form. Stored values are twice the
    algebraic coefficients. x and y share the same banded pattern, one point
    back is two slots and two points back is four slots.
    """
    if num_points < 3:
        raise ValueError("Kernel needs at least 3 points")
    num_variables = 2 * num_points
    data: List[float] = []
    indices: List[int] = []
    indptr: List[int] = [0]
    for point in range(num_points):
        coeffs = point_coefficients(point, num_points, weights)
        for axis in range(2):
            col = 2 * point + axis
            for offset, value in coeffs:
                data.append(2.0 * value)
                indices.append(col - 2 * offset)
            indptr.append(len(data))
    return sparse.csc_matrix(
        (
            np.asarray(data, dtype=float),
            np.asarray(indices, dtype=INDEX_DTYPE),
            np.asarray(indptr, dtype=INDEX_DTYPE),
        ),
        shape=(num_variables, num_variables),
    )
