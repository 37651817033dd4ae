from typing import List
import numpy as np
import matplotlib.pyplot as plt
from mapscale.model.models import Marker, ScaleBarGeometry
from .projection import Projection
from .scalebar import scale_bar


class PointsRenderer:
    def __init__(self, projection: Projection, pad: float = 0.1):
        self.p = projection
        self.pad = pad

    def project(self, markers: List[Marker]):
        lon = np.array([m.lon for m in markers])
        lat = np.array([m.lat for m in markers])
        x, y = self.p.lonlat_to_xy(lon, lat)
        return np.asarray(x), np.asarray(y)

    def draw(self, markers: List[Marker], scalebar: dict | None = None,
             title: str | None = None, output: str | None = None):
        fig, ax = plt.subplots(figsize=(10, 8), dpi=120)
        x, y = self.project(markers)

        # マーカー
        ax.plot(x, y, linestyle="none", marker='o', markersize=6,
                mec='black', mfc='yellow', zorder=6)
        for m, xm, ym in zip(markers, x, y):
            if m.label:
                ax.annotate(m.label, (xm, ym),
                            xytext=(5, 8), textcoords='offset points',
                            fontsize=12,
                            bbox=dict(boxstyle="round,pad=0.25",
                                    fc="white", ec="gray", alpha=0.85),
                            zorder=7)

        # 範囲: 点群の外接矩形 + 余白（1点だけでも潰れないよう最低 1km）
        dx = max(x.max() - x.min(), 1000.0) * self.pad
        dy = max(y.max() - y.min(), 1000.0) * self.pad
        ax.set_xlim(x.min() - dx, x.max() + dx)
        ax.set_ylim(y.min() - dy, y.max() + dy)
        ax.set_aspect("equal", adjustable="box")
        ax.set_xlabel(f"x [{self.p.crs}]")
        ax.set_ylabel("y")
        if title:
            ax.set_title(title)

        geom: ScaleBarGeometry | None = None
        if scalebar is not None:
            geom = scale_bar(ax, self.p, **scalebar)

        plt.tight_layout()
        if output:
            fig.savefig(output, dpi=150)
            plt.close(fig)
        else:
            plt.show()
        return fig, ax, geom
