# cli.py
import argparse
import numpy as np
from .config import VizConfig, load_json
from .projection import UTMProjection, WebMercatorProjection, utm_zone
from .renderer import PointsRenderer
from mapscale.geometry.distance import max_earth_dist
from mapscale.model.loader import MarkerLoader

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Plot lat/lon points with a scale bar")
    p.add_argument("--config", help="引数をまとめたJSONファイル")
    p.add_argument("--points", help="points.json (lat/lon/label)")
    p.add_argument("--utm", action="store_true", default=None, help="Web Mercator ではなく UTM で描画")
    p.add_argument("--x", type=float)
    p.add_argument("--y", type=float)
    p.add_argument("--length", type=float)
    p.add_argument("--abslen", type=float)
    p.add_argument("--unit", choices=["km", "m", "mi", "ft", "yd"])
    p.add_argument("--label")
    p.add_argument("--type", choices=["bar", "line"])
    p.add_argument("--ndiv", type=int)
    p.add_argument("--output", help="PNG の保存先（未指定なら画面表示）")
    p.add_argument("--print-maxdist", action="store_true", default=None,
                   help="点群の最大距離[km]を標準出力")
    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    cfg_dict = load_json(args.config)
    # JSONをデフォルトに、CLIで上書き
    for k, v in vars(args).items():
        if k == "config": continue
        if v is not None: cfg_dict[k] = v
    if not cfg_dict.get("points"):
        raise ValueError("missing required arg (via CLI or config): points")
    cfg = VizConfig(**cfg_dict)

    markers = MarkerLoader().load_markers(cfg.points)
    lat = np.array([m.lat for m in markers])
    lon = np.array([m.lon for m in markers])

    if cfg.print_maxdist:
        print("# n_points,max_dist_km")
        print(f"{len(markers)},{max_earth_dist(lat, lon):.3f}")

    if cfg.utm:
        projection = UTMProjection.from_lonlat(float(lon.mean()), float(lat.mean()))
        zones = sorted({utm_zone(v) for v in lon})
        if len(zones) > 1:
            print(f"[WARN] points span UTM zones {zones}; using zone {projection.zone}")
    else:
        projection = WebMercatorProjection()

    _, _, geom = PointsRenderer(projection).draw(
        markers, scalebar=cfg.scalebar_kwargs(), output=cfg.output)
    return geom

if __name__ == "__main__":
    main()
