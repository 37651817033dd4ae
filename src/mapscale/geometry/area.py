# area.py
from typing import Sequence

import numpy as np


def triangle_area(x: Sequence[float], y: Sequence[float], digits: int = 3) -> float:
    """
    3頂点 (x[i], y[i]) の三角形の面積（符号なし、Shoelace 公式）。
    同一直線上の3点なら 0。
    """
    xs = _as_vertex_vector(x, "x")
    ys = _as_vertex_vector(y, "y")
    area = 0.5 * (
        xs[0] * (ys[1] - ys[2])
        + xs[1] * (ys[2] - ys[0])
        + xs[2] * (ys[0] - ys[1])
    )
    return round(abs(float(area)), digits)


def _as_vertex_vector(v, name: str) -> np.ndarray:
    try:
        arr = np.asarray(v, dtype=float)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be numeric, not {v!r}")
    if arr.ndim != 1 or arr.shape[0] != 3:
        raise ValueError(f"{name} must be of length 3, not {arr.size}")
    return arr
