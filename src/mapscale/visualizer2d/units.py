# units.py
import math

import numpy as np

# 1単位あたりの m
UNIT_FACTORS = {
    "m": 1.0,
    "km": 1000.0,
    "mi": 1609.34,
    "ft": 0.3048,
    "yd": 0.9144,
}

# ndiv=1..6 の剰余から引くバイアス。同点なら 5>4>3>2>6>1 の順で選ばれる
NDIV_BIAS = np.array([0.0, 0.2, 0.3, 0.4, 0.5, 0.1])


def unit_factor(unit: str) -> float:
    if not isinstance(unit, str):
        raise ValueError(f"unit must be a character string, not a {type(unit).__name__}")
    try:
        return UNIT_FACTORS[unit]
    except KeyError:
        raise ValueError(
            f"unit '{unit}' not supported. Use one of: {', '.join(UNIT_FACTORS)}"
        ) from None


def pretty(lo: float, hi: float, n: int = 10) -> np.ndarray:
    """
    [lo, hi] を覆う 1/2/5×10^k 刻みのきりの良い値の列（R の pretty() 相当）。
    """
    h, h5 = 1.5, 0.5 + 1.5 * 1.5
    dx = hi - lo
    cell = dx / n if dx > 0 else max(abs(lo), 1.0)
    base = 10.0 ** math.floor(math.log10(cell))

    unit = base
    if 2 * base - cell < h * (cell - unit):
        unit = 2 * base
        if 5 * base - cell < h5 * (cell - unit):
            unit = 5 * base
            if 10 * base - cell < h * (cell - unit):
                unit = 10 * base

    ns = math.floor(lo / unit + 1e-7)
    nu = math.ceil(hi / unit - 1e-7)
    # 0.2*3 = 0.6000000000000001 のような表示崩れを防ぐ
    return np.round(np.arange(ns, nu + 1) * unit, 12)


def choose_ndiv(abslen: float) -> int:
    """abslen（表示単位）を最も割り切りやすい分割数 1..6"""
    score = np.mod(abslen, np.arange(1, 7)) - NDIV_BIAS
    return int(np.argmin(score)) + 1
