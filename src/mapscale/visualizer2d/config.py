# config.py
from dataclasses import dataclass
from pathlib import Path
import json

@dataclass
class VizConfig:
    points: str
    utm: bool = False
    x: float = 0.1
    y: float = 0.9
    length: float = 0.2
    abslen: float | None = None
    unit: str = "km"
    label: str | None = None
    type: str = "bar"
    ndiv: int | None = None
    output: str | None = None
    print_maxdist: bool = False

    def scalebar_kwargs(self) -> dict:
        return dict(x=self.x, y=self.y, length=self.length, abslen=self.abslen,
                    unit=self.unit, label=self.label, type=self.type, ndiv=self.ndiv)

def load_json(path: str | None) -> dict:
    if not path: return {}
    p = Path(path)
    if not p.exists(): raise FileNotFoundError(path)
    with p.open("r", encoding="utf-8") as f: cfg = json.load(f)
    if not isinstance(cfg, dict): raise ValueError("config json must be an object")
    return cfg
