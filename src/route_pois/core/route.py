"""Build the normalized route model from raw track points."""

import logging
from math import inf
from typing import Callable, Optional, Sequence

from .errors import EmptyRouteError
from .geo import haversine_distance
from .models import RawTrackPoint, Route, RoutePoint, RouteStats

logger = logging.getLogger(__name__)


def build_route(name: str, raw_points: Sequence[RawTrackPoint]) -> Route:
    """
    Annotate raw track points with cumulative distance and elevation stats.

    Args:
        name: Route name
        raw_points: Track points in order (objects with lat, lon, ele)

    Returns:
        Route with rounded per-point distances and stats

    Raises:
        EmptyRouteError: If no points were given
    """
    if not raw_points:
        raise EmptyRouteError(f"No track points found for route: {name}")

    cumulative_m = 0.0
    gain_m = 0.0
    loss_m = 0.0
    min_ele = inf
    max_ele = -inf

    points = []
    previous = None
    for point in raw_points:
        if previous is not None:
            cumulative_m += haversine_distance(previous.lat, previous.lon, point.lat, point.lon)
            delta = point.ele - previous.ele
            if delta > 0:
                gain_m += delta
            else:
                loss_m += -delta

        min_ele = min(min_ele, point.ele)
        max_ele = max(max_ele, point.ele)

        points.append(RoutePoint(
            lat=point.lat,
            lon=point.lon,
            ele=point.ele,
            dist_km=round(cumulative_m / 1000, 3),
        ))
        previous = point

    stats = RouteStats(
        distance_km=round(cumulative_m / 1000, 1),
        gain_m=int(round(gain_m)),
        loss_m=int(round(loss_m)),
        min_ele=round(min_ele, 1),
        max_ele=round(max_ele, 1),
    )

    return Route(name=name, points=tuple(points), stats=stats)


class RouteCache:
    """
    Hold a single route built on first use.

    The cached Route is immutable, so it is shared between readers without
    locking. ``invalidate`` forces the next ``get_or_build`` to reload.
    """

    def __init__(self, loader: Callable[[], Route]):
        """
        Initialize the cache.

        Args:
            loader: Zero-argument callable that builds the route
        """
        self._loader = loader
        self._route: Optional[Route] = None

    def get_or_build(self) -> Route:
        """Return the cached route, building it if needed."""
        if self._route is None:
            route = self._loader()
            logger.info(
                "Built route '%s' with %d points (%.1f km)",
                route.name, len(route.points), route.stats.distance_km,
            )
            self._route = route
        return self._route

    def invalidate(self):
        """Drop the cached route."""
        self._route = None

    @property
    def is_cached(self) -> bool:
        return self._route is not None
