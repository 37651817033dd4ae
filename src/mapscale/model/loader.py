from __future__ import annotations
import pathlib, json, warnings
from typing import Any, List

from .models import Marker


class MarkerLoader:
    """points.json を読み込んで Marker のリストにする"""

    def _load_json(self, path: str | pathlib.Path) -> Any:
        p = pathlib.Path(path)
        if not p.exists():
            raise FileNotFoundError(f"points file not found: {p}")
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)

    # --- 公開API ------------------------------------------------------

    def load_markers(self, path: str | pathlib.Path) -> List[Marker]:
        """
        以下のどちらの形式も受け付ける:
          {"points": [{"lat": .., "lon": .., "label": ..}, ...]}
          [{"lat": .., "lon": ..}, ...]
        lat/lon が欠けている・数値でないエントリは警告してスキップ。
        """
        data = self._load_json(path)
        items = data.get("points", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ValueError("points must be a list")

        markers: List[Marker] = []
        for idx, item in enumerate(items):
            try:
                lat = float(item["lat"])
                lon = float(item["lon"])
            except (KeyError, TypeError, ValueError):
                warnings.warn(f"Skipping malformed point #{idx}: {item!r}")
                continue
            if not (-90.0 <= lat <= 90.0):
                warnings.warn(f"Skipping point #{idx}: latitude {lat} out of range")
                continue
            markers.append(Marker(lat=lat, lon=lon, label=item.get("label")))

        if not markers:
            raise ValueError(f"no valid points in {path}")
        return markers
