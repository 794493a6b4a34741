"""Geometry helpers for measuring points against a route.

All distances use a spherical Earth. Segment distances go through a local
equirectangular projection, which is only accurate for the short segments
between consecutive GPS samples.
"""

from math import asin, cos, hypot, inf, radians, sin, sqrt
from typing import List, Sequence, Tuple

from .models import NearestOnRoute, RoutePoint

EARTH_RADIUS_M = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two points in meters using Haversine formula.

    Args:
        lat1, lon1: Coordinates of first point
        lat2, lon2: Coordinates of second point

    Returns:
        Distance in meters
    """
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)

    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2

    return 2 * EARTH_RADIUS_M * asin(sqrt(a))


def project_to_local_plane(lat: float, lon: float, ref_lat: float) -> Tuple[float, float]:
    """Project a coordinate to planar meters, scaling x by cos(ref_lat)."""
    x = radians(lon) * EARTH_RADIUS_M * cos(radians(ref_lat))
    y = radians(lat) * EARTH_RADIUS_M
    return x, y


def point_segment_distance(point, start, end) -> float:
    """
    Distance in meters from a point to the segment [start, end].

    The three coordinates are projected with the mean latitude of all three
    as reference, then the planar distance to the clamped projection is
    returned. Not geodesically exact over long segments.

    Args:
        point, start, end: Objects with ``lat`` and ``lon`` attributes

    Returns:
        Distance in meters
    """
    ref_lat = (point.lat + start.lat + end.lat) / 3
    px, py = project_to_local_plane(point.lat, point.lon, ref_lat)
    ax, ay = project_to_local_plane(start.lat, start.lon, ref_lat)
    bx, by = project_to_local_plane(end.lat, end.lon, ref_lat)

    abx = bx - ax
    aby = by - ay
    apx = px - ax
    apy = py - ay
    ab2 = abx * abx + aby * aby

    if ab2 == 0:
        return hypot(apx, apy)

    t = max(0.0, min(1.0, (apx * abx + apy * aby) / ab2))
    cx = ax + t * abx
    cy = ay + t * aby

    return hypot(px - cx, py - cy)


def nearest_point_on_route(points: Sequence[RoutePoint], point) -> NearestOnRoute:
    """
    Find the closest route segment to a point.

    The reported index is the endpoint of the closest segment that is
    nearer to the point (by haversine), i.e. the route sample to snap to,
    not the exact projected location.

    Args:
        points: Route points in order
        point: Object with ``lat`` and ``lon`` attributes

    Returns:
        NearestOnRoute with index, distance in meters and along-route km
    """
    if not points:
        return NearestOnRoute(index=0, distance_meters=inf, dist_along_km=0.0)

    if len(points) == 1:
        only = points[0]
        return NearestOnRoute(
            index=0,
            distance_meters=haversine_distance(point.lat, point.lon, only.lat, only.lon),
            dist_along_km=only.dist_km,
        )

    best_distance = inf
    best_index = 0

    for i in range(len(points) - 1):
        start = points[i]
        end = points[i + 1]
        distance = point_segment_distance(point, start, end)
        if distance < best_distance:
            to_start = haversine_distance(point.lat, point.lon, start.lat, start.lon)
            to_end = haversine_distance(point.lat, point.lon, end.lat, end.lon)
            best_distance = distance
            best_index = i if to_start <= to_end else i + 1

    return NearestOnRoute(
        index=best_index,
        distance_meters=best_distance,
        dist_along_km=points[best_index].dist_km,
    )


def sample_route_points(points: Sequence[RoutePoint], step_km: float) -> List[RoutePoint]:
    """
    Thin a route to roughly one point every ``step_km``.

    The first and last points are always kept.

    Args:
        points: Route points in order
        step_km: Sampling step in kilometers

    Returns:
        List of sampled route points
    """
    if not points:
        return []

    sampled = [points[0]]
    next_threshold = step_km

    for point in points:
        if point.dist_km >= next_threshold:
            sampled.append(point)
            next_threshold += step_km

    last = points[-1]
    if sampled[-1] is not last:
        sampled.append(last)

    return sampled


def nearest_route_index(points: Sequence[RoutePoint], dist_km: float) -> int:
    """Index of the route point whose cumulative distance is closest to ``dist_km``."""
    if not points:
        return 0

    # Lower bound, clamped to the last point
    lo, hi = 0, len(points) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if points[mid].dist_km < dist_km:
            lo = mid + 1
        else:
            hi = mid

    if lo == 0:
        return lo

    previous = lo - 1
    if abs(points[lo].dist_km - dist_km) <= abs(points[previous].dist_km - dist_km):
        return lo
    return previous
