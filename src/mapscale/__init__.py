"""
mapscale: 地図プロット用の小さな補助関数群。

- scale_bar: 投影済みの地図（Web Mercator / UTM など）にスケールバーを描く
- triangle_area: 3点からなる三角形の面積
- earth_dist / max_earth_dist: 緯度経度の点群の大円距離
"""
from mapscale.geometry.area import triangle_area
from mapscale.geometry.distance import EARTH_RADIUS_KM, earth_dist, max_earth_dist
from mapscale.model.models import MapExtent, Marker, ScaleBarGeometry
from mapscale.visualizer2d.projection import (
    CRSProjection,
    LocalENUProjection,
    UTMProjection,
    WebMercatorProjection,
    pll,
    pmerc,
    project_points,
    putm,
    utm_zone,
)
from mapscale.visualizer2d.scalebar import scale_bar

__all__ = [
    "scale_bar",
    "triangle_area",
    "earth_dist",
    "max_earth_dist",
    "EARTH_RADIUS_KM",
    "MapExtent",
    "Marker",
    "ScaleBarGeometry",
    "WebMercatorProjection",
    "UTMProjection",
    "LocalENUProjection",
    "CRSProjection",
    "pll",
    "pmerc",
    "putm",
    "utm_zone",
    "project_points",
]
