from typing import Tuple

import numpy as np


def interleave_xy(points: np.ndarray) -> np.ndarray:
    """(N, 2) points -> flat (x0, y0, x1, y1, ...)."""
    return np.ascontiguousarray(points, dtype=float).reshape(-1)


def deinterleave_xy(flat: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse of interleave_xy, returns copies of the x and y slots."""
    flat = np.asarray(flat, dtype=float)
    if flat.size % 2:
        raise ValueError("Interleaved vector must have even length")
    return flat[0::2].copy(), flat[1::2].copy()
