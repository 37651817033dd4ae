from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


# --- 座標範囲 ---------------------------------------------------------

@dataclass(frozen=True)
class MapExtent:
    """描画中の Axes の座標範囲（投影座標系の単位）"""
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def width(self) -> float:
        return self.xmax - self.xmin

    def height(self) -> float:
        return self.ymax - self.ymin

    def at(self, rx: float, ry: float) -> Tuple[float, float]:
        """相対位置 (0..1) → 絶対座標"""
        return (self.xmin + rx * self.width(), self.ymin + ry * self.height())

    @classmethod
    def from_axes(cls, ax) -> "MapExtent":
        xmin, xmax = ax.get_xlim()
        ymin, ymax = ax.get_ylim()
        return cls(xmin=float(xmin), xmax=float(xmax), ymin=float(ymin), ymax=float(ymax))


# --- スケールバー -----------------------------------------------------

@dataclass(frozen=True)
class ScaleBarGeometry:
    """scale_bar の戻り値。abslen は常に m 単位"""
    x: float
    end: float
    y: float
    abslen: float
    label: Tuple[float, ...]


# --- 地点マーカー -----------------------------------------------------

@dataclass(frozen=True)
class Marker:
    lat: float
    lon: float
    label: Optional[str] = None


__all__ = [
    "MapExtent",
    "ScaleBarGeometry",
    "Marker",
]
