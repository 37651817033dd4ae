# scalebar.py: 投影済み地図プロットにスケールバーを描く
from __future__ import annotations
import warnings
from typing import Sequence, Union

import numpy as np
from matplotlib import patches

from mapscale.model.models import MapExtent, ScaleBarGeometry
from mapscale.geometry.distance import earth_dist
from .projection import Projection, as_projection
from .textfield import char_size, format_number, text_field
from .units import unit_factor, pretty, choose_ndiv

BAR_TYPES = ("bar", "line")
N_SAMPLES = 5000
ZORDER = 10

# 背景の余白（文字の高さ/幅単位）: (下, 左, 上, 右)
MAR_BAR = (2.0, 0.7, 0.2, 3.0)
MAR_LINE = (2.0, 0.2, 0.2, 0.2)


def _check_relative(name: str, v: float) -> None:
    # NaN は大小比較をすり抜ける
    if not np.isfinite(v):
        raise ValueError(f"{name} must be between 0 and 1, not {v}")
    if v < 0:
        raise ValueError(f"{name} must be larger than 0, not {v}")
    if v > 1:
        raise ValueError(f"{name} must be lesser than 1, not {v}")


def suggest_length(width: float, factor: float, length: float) -> float:
    """
    図の横幅 width（投影単位）の length 割に最も近い、きりの良い長さ（表示単位）。
    """
    span = abs(width) / factor
    target = span * length
    suggested = pretty(0.0, span, n=10)
    abslen = float(suggested[np.argmin(np.abs(suggested - target))])
    if abslen == 0:
        positive = suggested[suggested > 0]
        abslen = float(positive[0])
        warnings.warn(
            f"scale bar length {length} rounds to 0; using {abslen:g} instead"
        )
    return abslen


def bar_end(projection: Projection, x0: float, y0: float, abslen_m: float) -> float:
    """
    始点 (x0, y0) から東へ abslen_m [m] 進んだ点の x 座標（投影単位）。

    軸が m の投影ならそのまま足す。Mercator などでは x 方向に点を並べて
    緯度経度に戻し、始点からの大円距離が abslen_m に最も近い点を選ぶ。
    """
    if projection.is_metric:
        return x0 + abslen_m

    # Mercator の 1 単位は実距離で cos(lat) m。高緯度でも探索範囲に収める
    _, lat0 = projection.xy_to_lonlat(x0, y0)
    stretch = 1.0 / max(np.cos(np.radians(lat0)), 1e-3)
    pts_x = np.linspace(x0, x0 + 2.0 * abslen_m * stretch, N_SAMPLES)
    lon, lat = projection.xy_to_lonlat(pts_x, np.full(N_SAMPLES, y0))
    pts_d = earth_dist(lat, lon, i=0) * 1000.0  # km -> m
    return float(pts_x[np.argmin(np.abs(pts_d - abslen_m))])


def _background(ax, xleft, xright, ybottom, ytop, bg) -> None:
    if bg in (None, "none", "transparent"):
        return
    ax.add_patch(patches.Rectangle(
        (xleft, ybottom), xright - xleft, ytop - ybottom,
        facecolor=bg, edgecolor="none", zorder=ZORDER - 1,
    ))


def scale_bar(
    ax,
    projection: Union[Projection, str],
    x: float = 0.1,
    y: float = 0.9,
    length: float = 0.2,
    abslen: float | None = None,
    unit: str = "km",
    label: str | None = None,
    type: str = "bar",
    ndiv: int | None = None,
    field: str | None = "rect",
    fill=None,
    adj=(0.5, 1.5),
    fontsize: float | None = None,
    col: Union[str, Sequence] = ("black", "white"),
    targs: dict | None = None,
    lwd: float = 7,
    lend: str = "butt",
    bg="transparent",
    mar: Sequence[float] | None = None,
    **kwargs,
) -> ScaleBarGeometry:
    """
    地図（Web Mercator / UTM など）にスケールバーを描く。

    x, y   : バー左端の相対位置 (0..1)
    length : abslen 未指定時のおおよその相対長さ
    abslen : unit 単位の長さ。未指定ならきりの良い値を自動選択
    unit   : "km", "m", "mi", "ft", "yd"
    type   : "bar"（白黒の区切りバー）または "line"
    ndiv   : type="bar" の分割数。未指定なら abslen の割り切りやすさで 1..6 から選ぶ
    mar    : 背景の余白 (下, 左, 上, 右)、文字サイズ単位
    kwargs : "line" なら線、"bar" なら矩形にそのまま渡す

    戻り値の abslen は m 単位。Axes の表示範囲は変更しない。
    """
    _check_relative("x", x)
    _check_relative("y", y)
    if type not in BAR_TYPES:
        raise NotImplementedError(f"type {type} is not implemented. Please use 'bar' or 'line'.")
    f = unit_factor(unit)
    if label is None:
        label = unit
    if isinstance(col, str):
        col = (col,)
    targs = targs or {}
    proj = as_projection(projection)

    ext = MapExtent.from_axes(ax)
    if abslen is None:
        abslen = suggest_length(ext.width(), f, length)
    abslen = float(abslen)
    if not (np.isfinite(abslen) and abslen > 0):
        raise ValueError(f"abslen must be a positive number, not {abslen}")
    abslen_m = abslen * f

    x0, y0 = ext.at(x, y)
    end = bar_end(proj, x0, y0, abslen_m)
    cw, ch = char_size(ax, fontsize)
    text_kw = dict(field=field, fill=fill, adj=adj, fontsize=fontsize, color=col[0])
    text_kw.update(targs)

    if type == "line":
        mar = MAR_LINE if mar is None else mar
        _background(ax, x0 - mar[1] * cw, end + mar[3] * cw,
                    y0 - mar[0] * ch, y0 + mar[2] * ch, bg)
        ax.plot([x0, end], [y0, y0], linewidth=lwd, solid_capstyle=lend,
                color=col[0], zorder=ZORDER, **kwargs)
        xl = np.array([0.5 * (x0 + end)])
        text_field(ax, xl, y0, f"{format_number(abslen)} {label}", **text_kw)
    else:
        mar = MAR_BAR if mar is None else mar
        if ndiv is None:
            ndiv = choose_ndiv(abslen)
        ndiv = int(ndiv)
        if ndiv < 1:
            raise ValueError(f"ndiv must be at least 1, not {ndiv}")
        frac = np.linspace(0.0, 1.0, ndiv + 1)
        xl = x0 + frac * (end - x0)
        ytop = y0 + ch * lwd / 7.0
        _background(ax, x0 - mar[1] * cw, end + mar[3] * cw,
                    y0 - mar[0] * ch, ytop + mar[2] * ch, bg)
        for i in range(ndiv):
            ax.add_patch(patches.Rectangle(
                (xl[i], y0), xl[i + 1] - xl[i], ytop - y0,
                facecolor=col[i % len(col)], edgecolor=col[0],
                zorder=ZORDER, **kwargs,
            ))
        labs = np.round(frac * abslen, 2)
        text_field(ax, xl, y0, list(labs), **text_kw)
        # 単位ラベルは最後の数値ラベルの右隣
        last_w = len(format_number(labs[-1])) * cw
        text_field(ax, end + 0.5 * (last_w + 2 * cw), y0, label, **text_kw)

    # パッチ追加で autoscale が走らないよう元の範囲に戻す
    ax.set_xlim(ext.xmin, ext.xmax)
    ax.set_ylim(ext.ymin, ext.ymax)
    return ScaleBarGeometry(
        x=x0, end=end, y=y0, abslen=abslen_m,
        label=tuple(float(v) for v in xl),
    )
