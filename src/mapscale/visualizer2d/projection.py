# projection.py
from dataclasses import dataclass
from typing import Tuple, Protocol, Union

import numpy as np
from pyproj import CRS, Transformer


def pll() -> str:
    """緯度経度（WGS84）の proj 文字列"""
    return "+proj=longlat +datum=WGS84 +no_defs"


def pmerc() -> str:
    """Web Mercator（タイル地図の標準）"""
    return "EPSG:3857"


def utm_zone(lon: float) -> int:
    """経度 → UTM ゾーン番号 (1..60)"""
    return int((np.floor((float(lon) + 180.0) / 6.0) % 60) + 1)


def putm(lon: float | None = None, zone: int | None = None, south: bool = False) -> str:
    """UTM の proj 文字列。zone 未指定なら lon から決める"""
    if zone is None:
        if lon is None:
            raise ValueError("putm needs either lon or zone")
        zone = utm_zone(float(np.mean(lon)))
    if not 1 <= int(zone) <= 60:
        raise ValueError(f"zone must be between 1 and 60, not {zone}")
    s = " +south" if south else ""
    return f"+proj=utm +zone={int(zone)}{s} +ellps=WGS84 +datum=WGS84 +units=m +no_defs"


class Projection(Protocol):
    crs: str
    is_metric: bool
    def lonlat_to_xy(self, lon, lat) -> Tuple[float, float]: ...
    def xy_to_lonlat(self, x, y) -> Tuple[float, float]: ...


@dataclass(frozen=True)
class WebMercatorProjection:
    """EPSG:4326 <-> EPSG:3857（軸の単位は実距離の m ではない）"""
    crs: str = "EPSG:3857"
    is_metric: bool = False

    def __post_init__(self):
        object.__setattr__(self, "_to_merc",
            Transformer.from_crs("EPSG:4326", self.crs, always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs(self.crs, "EPSG:4326", always_xy=True))
    def lonlat_to_xy(self, lon, lat):
        return self._to_merc.transform(lon, lat)
    def xy_to_lonlat(self, x, y):
        return self._to_geo.transform(x, y)


@dataclass(frozen=True)
class UTMProjection:
    zone: int
    south: bool = False
    is_metric: bool = True

    def __post_init__(self):
        crs = putm(zone=self.zone, south=self.south)
        object.__setattr__(self, "crs", crs)
        object.__setattr__(self, "_to_utm",
            Transformer.from_crs("EPSG:4326", crs, always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs(crs, "EPSG:4326", always_xy=True))

    @classmethod
    def from_lonlat(cls, lon: float, lat: float) -> "UTMProjection":
        return cls(zone=utm_zone(lon), south=lat < 0)

    def lonlat_to_xy(self, lon, lat):
        return self._to_utm.transform(lon, lat)
    def xy_to_lonlat(self, x, y):
        return self._to_geo.transform(x, y)


@dataclass(frozen=True)
class LocalENUProjection:
    origin_lat: float
    origin_lon: float
    is_metric: bool = True

    def __post_init__(self):
        proj_str = f"+proj=aeqd +lat_0={self.origin_lat} +lon_0={self.origin_lon} +datum=WGS84 +units=m +no_defs"
        object.__setattr__(self, "crs", proj_str)
        object.__setattr__(self, "_to_local",
            Transformer.from_crs("EPSG:4326", proj_str, always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs(proj_str, "EPSG:4326", always_xy=True))
    def lonlat_to_xy(self, lon, lat):
        return self._to_local.transform(lon, lat)
    def xy_to_lonlat(self, x, y):
        return self._to_geo.transform(x, y)


@dataclass(frozen=True)
class CRSProjection:
    """任意の CRS（proj 文字列 / EPSG コード）。UTM のときだけ軸を m とみなす"""
    crs: str

    def __post_init__(self):
        c = CRS.from_user_input(self.crs)
        object.__setattr__(self, "is_metric", c.utm_zone is not None)
        object.__setattr__(self, "_to_xy",
            Transformer.from_crs("EPSG:4326", c, always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs(c, "EPSG:4326", always_xy=True))
    def lonlat_to_xy(self, lon, lat):
        return self._to_xy.transform(lon, lat)
    def xy_to_lonlat(self, x, y):
        return self._to_geo.transform(x, y)


def as_projection(p: Union[Projection, str]) -> Projection:
    if isinstance(p, str):
        return CRSProjection(p)
    if not (hasattr(p, "xy_to_lonlat") and hasattr(p, "is_metric")):
        raise TypeError(f"expected a Projection or CRS string, not {type(p).__name__}")
    return p


def project_points(lat, lon, from_crs: str | None = None, to_crs: str | None = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    点列を from_crs → to_crs に変換して (x, y) を返す。
    from_crs 既定は pll()、to_crs 既定は lon の平均から決めた UTM。
    from_crs が緯度経度でない場合、lat/lon にはそれぞれ y/x を渡す。
    """
    la = np.atleast_1d(np.asarray(lat, dtype=float))
    lo = np.atleast_1d(np.asarray(lon, dtype=float))
    if la.shape != lo.shape:
        raise ValueError(f"lat and lon must have the same length, not {la.size} and {lo.size}")
    if from_crs is None:
        from_crs = pll()
    if to_crs is None:
        to_crs = putm(lon=lo)
    t = Transformer.from_crs(from_crs, to_crs, always_xy=True)
    x, y = t.transform(lo, la)
    return np.asarray(x), np.asarray(y)
