"""Error types shared by the route and POI matching code."""


class RoutePoisError(RuntimeError):
    """Base error for route-pois failures."""


class EmptyRouteError(RoutePoisError):
    """Raised when a track holds no usable points."""


class TrackParseError(RoutePoisError):
    """Raised when a track file cannot be parsed."""


class TransientSourceError(RoutePoisError):
    """Raised when an endpoint answers with a retryable status."""

    def __init__(self, status_code: int, endpoint: str = ""):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(f"retryable:{status_code}")


class EndpointError(RoutePoisError):
    """Raised for non-retryable endpoint failures (bad status, timeout, bad JSON)."""


class AllEndpointsExhaustedError(RoutePoisError):
    """Raised when every endpoint and attempt failed for one query."""

    def __init__(self, last_reason: str):
        self.last_reason = last_reason
        super().__init__(f"Overpass unavailable ({last_reason})")


class AllSourcesUnavailableError(RoutePoisError):
    """Raised when no batch of a POI request could be fetched."""


__all__ = [
    "RoutePoisError",
    "EmptyRouteError",
    "TrackParseError",
    "TransientSourceError",
    "EndpointError",
    "AllEndpointsExhaustedError",
    "AllSourcesUnavailableError",
]
