"""Core route model and geometry for route-pois."""

from .geo import (
    haversine_distance,
    project_to_local_plane,
    point_segment_distance,
    nearest_point_on_route,
    sample_route_points,
    nearest_route_index,
)
from .models import (
    GeoPoint,
    NearestOnRoute,
    Poi,
    PoiCategory,
    RawTrackPoint,
    Route,
    RoutePoint,
    RouteStats,
)
from .route import build_route, RouteCache
from .gpx import load_gpx_track, load_route
from .config import Config

__all__ = [
    "haversine_distance",
    "project_to_local_plane",
    "point_segment_distance",
    "nearest_point_on_route",
    "sample_route_points",
    "nearest_route_index",
    "GeoPoint",
    "NearestOnRoute",
    "Poi",
    "PoiCategory",
    "RawTrackPoint",
    "Route",
    "RoutePoint",
    "RouteStats",
    "build_route",
    "RouteCache",
    "load_gpx_track",
    "load_route",
    "Config",
]
