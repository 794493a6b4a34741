"""Global pytest fixtures & helpers.

Adds the src directory to the path and provides small routes, GPX files and
fake Overpass elements shared by the test modules.
"""
import os
import sys

import pytest

SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from route_pois.core import RawTrackPoint, RoutePoint, build_route


GPX_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>{name}</name>
    <trkseg>
{points}
    </trkseg>
  </trk>
</gpx>
"""


# --- Factory helpers -------------------------------------------------
def make_gpx(name, points):
    """Render a one-segment GPX document from (lat, lon, ele-or-None) tuples."""
    rows = []
    for lat, lon, ele in points:
        if ele is None:
            rows.append(f'      <trkpt lat="{lat}" lon="{lon}"></trkpt>')
        else:
            rows.append(f'      <trkpt lat="{lat}" lon="{lon}"><ele>{ele}</ele></trkpt>')
    return GPX_TEMPLATE.format(name=name, points="\n".join(rows))


def straight_route(n_points=41, step_deg=0.01, lat=48.0, lon=2.0, name="Line"):
    """Route heading north along a meridian, roughly 1.11 km per step."""
    raw = [RawTrackPoint(lat + i * step_deg, lon, 100.0 + i) for i in range(n_points)]
    return build_route(name, raw)


def element(el_id, lat, lon, tags, el_type="node"):
    return {"type": el_type, "id": el_id, "lat": lat, "lon": lon, "tags": tags}


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def three_point_route():
    return [
        RoutePoint(lat=48.0, lon=2.0, ele=80, dist_km=0.0),
        RoutePoint(lat=48.001, lon=2.001, ele=82, dist_km=0.14),
        RoutePoint(lat=48.002, lon=2.002, ele=84, dist_km=0.28),
    ]


@pytest.fixture
def line_route():
    return straight_route()


@pytest.fixture
def gpx_file(tmp_path):
    path = tmp_path / "route.gpx"
    path.write_text(make_gpx("Fontainebleau - Chissey", [
        (48.0, 2.0, 100.0),
        (48.001, 2.001, 110.0),
        (48.002, 2.002, 105.0),
        (48.003, 2.003, 120.0),
    ]), encoding="utf-8")
    return path
