# textfield.py
from typing import List, Sequence, Tuple, Union

import numpy as np
import matplotlib.pyplot as plt

# フォントサイズ[pt]に対する "m" 1文字の幅・高さの目安
CHAR_WIDTH_EM = 0.8
CHAR_HEIGHT_EM = 0.7


def char_size(ax, fontsize: float | None = None) -> Tuple[float, float]:
    """
    文字 "m" 1つ分の (幅, 高さ) をデータ座標で返す。
    描画前でも使えるよう、フォントサイズと Axes のピクセル寸法から概算する。
    """
    if fontsize is None:
        fontsize = plt.rcParams["font.size"]
    px = fontsize * ax.figure.dpi / 72.0
    xmin, xmax = ax.get_xlim()
    ymin, ymax = ax.get_ylim()
    bb = ax.bbox
    w = CHAR_WIDTH_EM * px * (xmax - xmin) / max(1e-9, bb.width)
    h = CHAR_HEIGHT_EM * px * (ymax - ymin) / max(1e-9, bb.height)
    return w, h


def _ha(adj_x: float) -> str:
    if adj_x <= 0.25:
        return "left"
    if adj_x >= 0.75:
        return "right"
    return "center"


def text_field(
    ax,
    x: Union[float, Sequence[float]],
    y: Union[float, Sequence[float]],
    labels,
    field: str | None = "rect",
    fill=None,
    adj: Tuple[float, float] = (0.5, 1.5),
    fontsize: float | None = None,
    color="black",
    zorder: int = 11,
    **targs,
) -> List:
    """
    ラベル（必要なら背景ボックス付き）を描く。
    adj は (横, 縦) の揃え位置。縦 1.5 なら点の 1 行ぶん下に文字の中心が来る。
    field: "rect" / "round" / None。fill が None なら背景は描かない。
    """
    xs = np.atleast_1d(np.asarray(x, dtype=float))
    ys = np.broadcast_to(np.atleast_1d(np.asarray(y, dtype=float)), xs.shape)
    if isinstance(labels, str) or np.ndim(labels) == 0:
        labels = [labels] * xs.size
    if len(labels) != xs.size:
        raise ValueError(f"got {len(labels)} labels for {xs.size} positions")

    if fontsize is None:
        fontsize = plt.rcParams["font.size"]
    dy = (0.5 - adj[1]) * fontsize

    bbox = None
    if field and fill is not None:
        style = "round,pad=0.2" if field == "round" else "square,pad=0.15"
        bbox = dict(boxstyle=style, fc=fill, ec="none")

    # targs で color などを上書きできる
    kw = dict(ha=_ha(adj[0]), va="center", fontsize=fontsize, color=color,
              bbox=bbox, zorder=zorder, annotation_clip=False)
    kw.update(targs)

    texts = []
    for xi, yi, lab in zip(xs, ys, labels):
        texts.append(ax.annotate(
            _fmt(lab), (xi, yi),
            xytext=(0, dy), textcoords="offset points",
            **kw,
        ))
    return texts


def format_number(v, digits: int = 2) -> str:
    """小数第 digits 位までの固定小数点表記（指数表記にしない）。5.0 → "5" """
    return np.format_float_positional(round(float(v), digits), trim="-")


def _fmt(v) -> str:
    if isinstance(v, (int, float, np.integer, np.floating)):
        return format_number(v)
    return str(v)
