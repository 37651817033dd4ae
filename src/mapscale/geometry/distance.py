# distance.py: 球面上の大円距離
from __future__ import annotations
import warnings
from typing import Callable, Sequence

import numpy as np

EARTH_RADIUS_KM = 6371.0

# これを超える点数では O(N^2) の総当たりが目に見えて遅くなる
LARGE_INPUT = 2000


def _as_latlon(lat, lon) -> tuple[np.ndarray, np.ndarray]:
    la = np.atleast_1d(np.asarray(lat, dtype=float))
    lo = np.atleast_1d(np.asarray(lon, dtype=float))
    if la.shape != lo.shape:
        raise ValueError(f"lat and lon must have the same length, not {la.size} and {lo.size}")
    return la, lo


def earth_dist(
    lat: Sequence[float],
    lon: Sequence[float],
    r: float = EARTH_RADIUS_KM,
    i: int = 0,
    along: bool = False,
) -> np.ndarray:
    """
    大円距離（haversine）。単位は r と同じ（デフォルト km）。

    * along=False: 点 i から全点までの距離（i 自身は 0）
    * along=True : 隣り合う点どうしの距離。先頭は 0
    """
    la, lo = _as_latlon(lat, lon)
    y = np.radians(la)
    x = np.radians(lo)

    if along:
        y1, x1 = y[:-1], x[:-1]
        y2, x2 = y[1:], x[1:]
    else:
        if not -la.size <= i < la.size:
            raise IndexError(f"i={i} is out of range for {la.size} points")
        y1, x1 = y[i], x[i]
        y2, x2 = y, x

    h = np.sin((y2 - y1) / 2.0) ** 2 + np.cos(y1) * np.cos(y2) * np.sin((x2 - x1) / 2.0) ** 2
    # 対蹠点付近では丸め誤差で h が 1 をわずかに超える
    dist = 2.0 * r * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0)))

    if along:
        dist = np.concatenate(([0.0], dist))
    return dist


def max_earth_dist(
    lat: Sequence[float],
    lon: Sequence[float],
    r: float = EARTH_RADIUS_KM,
    fun: Callable = max,
    each: bool = False,
):
    """
    点群の中で最も離れた2点間の大円距離。

    全ての組 (i<j) について earth_dist を計算する総当たり O(N^2) の実装。
    数千点を超えるデータには向かない（LARGE_INPUT を超えると警告を出す）。

    fun : 全ての組の距離をまとめる関数（デフォルト max）
    each: True なら点ごとに「他の全点までの距離」へ fun を適用した配列を返す
    """
    la, lo = _as_latlon(lat, lon)
    n = la.size
    if n > LARGE_INPUT:
        warnings.warn(
            f"max_earth_dist compares all {n * (n - 1) // 2} point pairs; "
            "this is slow for large inputs"
        )

    if each:
        out = np.zeros(n)
        for i in range(n):
            others = np.delete(earth_dist(la, lo, r=r, i=i), i)
            out[i] = fun(others) if others.size else 0.0
        return out

    if n < 2:
        return 0.0
    pairs = []
    for i in range(n - 1):
        # i より後ろの点とだけ比較すれば全ての組を一度ずつ見られる
        pairs.append(earth_dist(la[i:], lo[i:], r=r, i=0)[1:])
    return float(fun(np.concatenate(pairs)))
