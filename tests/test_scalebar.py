import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib import patches

from mapscale.geometry.distance import earth_dist
from mapscale.visualizer2d.projection import UTMProjection, WebMercatorProjection
from mapscale.visualizer2d.scalebar import ZORDER, bar_end, scale_bar, suggest_length


@pytest.fixture
def utm_ax():
    fig, ax = plt.subplots(figsize=(8, 6), dpi=100)
    ax.set_xlim(300000, 320000)
    ax.set_ylim(5800000, 5815000)
    return ax, UTMProjection(zone=33)


@pytest.fixture
def merc_ax():
    proj = WebMercatorProjection()
    x0, y0 = proj.lonlat_to_xy(12.9, 52.35)
    x1, y1 = proj.lonlat_to_xy(13.3, 52.55)
    fig, ax = plt.subplots(figsize=(8, 6), dpi=100)
    ax.set_xlim(x0, x1)
    ax.set_ylim(y0, y1)
    return ax, proj


def _bar_rects(ax):
    return [p for p in ax.patches if isinstance(p, patches.Rectangle) and p.get_zorder() == ZORDER]


@pytest.mark.parametrize("name, kw", [
    ("x", dict(x=-0.1)), ("x", dict(x=1.5)), ("y", dict(y=-0.01)), ("y", dict(y=2)),
    ("x", dict(x=float("nan"))), ("y", dict(y=float("nan"))), ("x", dict(x=float("inf"))),
])
def test_relative_position_out_of_range(utm_ax, name, kw):
    ax, proj = utm_ax
    with pytest.raises(ValueError, match=name):
        scale_bar(ax, proj, **kw)


def test_unknown_type_is_not_implemented(utm_ax):
    ax, proj = utm_ax
    with pytest.raises(NotImplementedError, match="'bar' or 'line'"):
        scale_bar(ax, proj, type="checkerboard")


def test_unknown_unit_is_an_error(utm_ax):
    ax, proj = utm_ax
    with pytest.raises(ValueError, match="parsec"):
        scale_bar(ax, proj, unit="parsec")


@pytest.mark.parametrize("unit, factor", [("km", 1000.0), ("m", 1.0), ("mi", 1609.34)])
def test_explicit_abslen_is_converted_to_meters(utm_ax, unit, factor):
    ax, proj = utm_ax
    geom = scale_bar(ax, proj, abslen=3, unit=unit)
    assert geom.abslen == pytest.approx(3 * factor)


def test_explicit_abslen_ignores_map_extent(utm_ax):
    ax, proj = utm_ax
    ax.set_xlim(0, 1e6)
    geom = scale_bar(ax, proj, abslen=2, unit="km")
    assert geom.abslen == 2000.0


def test_metric_projection_end_is_exact(utm_ax):
    ax, proj = utm_ax
    geom = scale_bar(ax, proj, x=0.1, y=0.9, abslen=5, unit="km")
    assert geom.x == pytest.approx(302000.0)
    assert geom.y == pytest.approx(5813500.0)
    assert geom.end - geom.x == pytest.approx(5000.0)


def test_metric_projection_end_accepts_crs_string(utm_ax):
    ax, _ = utm_ax
    geom = scale_bar(ax, "EPSG:32633", abslen=5, unit="km")
    assert geom.end - geom.x == pytest.approx(5000.0)


def test_bar_defaults_to_five_divisions_for_five_km(utm_ax):
    ax, proj = utm_ax
    geom = scale_bar(ax, proj, abslen=5, unit="km")
    assert len(geom.label) == 6
    assert len(_bar_rects(ax)) == 5
    np.testing.assert_allclose(np.diff(geom.label), 1000.0)


def test_bar_explicit_ndiv_and_colors(utm_ax):
    ax, proj = utm_ax
    geom = scale_bar(ax, proj, abslen=4, unit="km", ndiv=2, col=("red", "blue"))
    rects = _bar_rects(ax)
    assert len(rects) == 2
    assert len(geom.label) == 3
    assert rects[0].get_facecolor() != rects[1].get_facecolor()


def test_bar_labels_and_unit_label(utm_ax):
    ax, proj = utm_ax
    scale_bar(ax, proj, abslen=5, unit="km", label="kilometers")
    texts = [t.get_text() for t in ax.texts]
    assert texts == ["0", "1", "2", "3", "4", "5", "kilometers"]


def test_line_label_keeps_all_digits(utm_ax):
    ax, proj = utm_ax
    scale_bar(ax, proj, abslen=1234567, unit="m", type="line")
    assert [t.get_text() for t in ax.texts] == ["1234567 m"]


def test_bar_labels_keep_two_decimals(utm_ax):
    ax, proj = utm_ax
    scale_bar(ax, proj, abslen=12345.67, unit="m", ndiv=1)
    assert [t.get_text() for t in ax.texts] == ["0", "12345.67", "m"]


def test_fractional_bar_labels(utm_ax):
    ax, proj = utm_ax
    scale_bar(ax, proj, abslen=0.5, unit="km", ndiv=2)
    assert [t.get_text() for t in ax.texts] == ["0", "0.25", "0.5", "km"]


@pytest.mark.parametrize("abslen", [0, -2, float("nan")])
def test_non_positive_abslen(utm_ax, abslen):
    ax, proj = utm_ax
    with pytest.raises(ValueError, match="abslen"):
        scale_bar(ax, proj, abslen=abslen)


def test_invalid_ndiv(utm_ax):
    ax, proj = utm_ax
    with pytest.raises(ValueError, match="ndiv"):
        scale_bar(ax, proj, abslen=5, ndiv=0)


def test_suggested_length_is_round(utm_ax):
    ax, proj = utm_ax
    # 20 km 幅の 0.2 → 4 km
    geom = scale_bar(ax, proj, unit="km", length=0.2)
    assert geom.abslen == pytest.approx(4000.0)


def test_suggest_length_zero_falls_back_with_warning():
    with pytest.warns(UserWarning, match="rounds to 0"):
        assert suggest_length(20000.0, 1000.0, 0.01) == 2.0


def test_line_type(utm_ax):
    ax, proj = utm_ax
    geom = scale_bar(ax, proj, abslen=5, unit="km", type="line", bg="white")
    assert len(geom.label) == 1
    assert geom.label[0] == pytest.approx(0.5 * (geom.x + geom.end))
    assert [t.get_text() for t in ax.texts] == ["5 km"]
    # 背景の矩形だけが追加される
    assert len(ax.patches) == 1
    line = ax.lines[-1]
    np.testing.assert_allclose(line.get_xdata(), [geom.x, geom.end])


def test_transparent_background_draws_nothing_extra(utm_ax):
    ax, proj = utm_ax
    scale_bar(ax, proj, abslen=5, type="bar")
    n_plain = len(ax.patches)
    scale_bar(ax, proj, abslen=5, type="bar", y=0.5, bg="white")
    assert len(ax.patches) == 2 * n_plain + 1


def test_axes_limits_are_preserved(utm_ax):
    ax, proj = utm_ax
    before = (ax.get_xlim(), ax.get_ylim())
    scale_bar(ax, proj, x=0.9, abslen=15, unit="km")
    assert (ax.get_xlim(), ax.get_ylim()) == before


def test_mercator_bar_matches_ground_distance(merc_ax):
    ax, proj = merc_ax
    geom = scale_bar(ax, proj, abslen=5, unit="km")
    lon0, lat0 = proj.xy_to_lonlat(geom.x, geom.y)
    lon1, lat1 = proj.xy_to_lonlat(geom.end, geom.y)
    d = earth_dist([lat0, lat1], [lon0, lon1])[1]
    assert d == pytest.approx(5.0, rel=1e-3)
    # Mercator の軸は 52 度付近で実距離より約 1.6 倍伸びる
    assert geom.end - geom.x > 5000.0 * 1.5


def test_bar_end_metric_shortcut():
    proj = UTMProjection(zone=33)
    assert bar_end(proj, 1000.0, 2000.0, 250.0) == 1250.0
