"""Route and POI payloads for an HTTP layer.

Handlers return ``(payload, status)`` tuples and never raise for route or
Overpass failures, so any web framework can serve them as JSON.
"""

import logging
from datetime import datetime, timezone
from math import isfinite
from typing import Dict, List, Optional, Tuple

from .core import Config, Poi, RouteCache, load_route
from .core.errors import RoutePoisError
from .extractors import CorridorExtractor
from .overpass import FetchOrchestrator

logger = logging.getLogger(__name__)

MIN_RADIUS_KM = 1.0
MAX_RADIUS_KM = 10.0
DEFAULT_RADIUS_KM = 5.0


def parse_radius_km(raw, default: float = DEFAULT_RADIUS_KM) -> float:
    """
    Parse a radius query parameter.

    Missing, unparseable and non-finite values give ``default``; other values
    are rounded to one decimal and clamped to [1, 10] km.
    """
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not isfinite(value):
        return default
    return min(MAX_RADIUS_KM, max(MIN_RADIUS_KM, round(value, 1)))


def _meta(radius_km: float) -> Dict:
    return {
        "radiusKm": radius_km,
        "source": "overpass",
        "fetchedAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


class RouteService:
    """Serve one GPX route and the POIs along it.

    Use as a context manager, or call ``close``, to release the HTTP session
    of the default Overpass client.
    """

    def __init__(self, gpx_file, config: Optional[Config] = None,
                 orchestrator: Optional[FetchOrchestrator] = None):
        self.gpx_file = gpx_file
        self.config = config or Config()
        self.cache = RouteCache(lambda: load_route(self.gpx_file))
        self.extractor = CorridorExtractor(self.config, orchestrator)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def route_payload(self) -> Tuple[Dict, int]:
        try:
            route = self.cache.get_or_build()
        except (RoutePoisError, OSError) as e:
            logger.error("Could not build route from %s: %s", self.gpx_file, e)
            return {"error": str(e)}, 500
        return route.to_dict(), 200

    def lookup_pois(self, radius_raw=None) -> Tuple[Dict, int, List[Poi]]:
        """
        Find the POIs for a requested radius.

        Returns:
            ``(payload, status, pois)``, where ``pois`` is the list of Poi
            behind the payload (empty on failure)
        """
        radius_km = parse_radius_km(radius_raw, self.config.default_radius_km)

        try:
            route = self.cache.get_or_build()
            pois = self.extractor.extract(route, radius_km)
        except (RoutePoisError, OSError) as e:
            logger.error("POI lookup failed: %s", e)
            return {"pois": [], "meta": _meta(radius_km), "error": str(e)}, 503, []

        payload = {"pois": [poi.to_dict() for poi in pois], "meta": _meta(radius_km)}
        return payload, 200, pois

    def pois_payload(self, radius_raw=None) -> Tuple[Dict, int]:
        """
        Build the POI payload for a requested radius.

        Returns:
            ``({pois, meta}, 200)`` on success, or ``({pois: [], meta, error}, 503)``
        """
        payload, status, _ = self.lookup_pois(radius_raw)
        return payload, status

    def reset(self):
        """Forget the cached route so the GPX file is read again."""
        self.cache.invalidate()

    def close(self):
        self.extractor.close()
