"""route-pois - Route profiles and POIs along GPX tracks."""

__version__ = "0.1.0"

# Expose main classes for programmatic use
from .core import Config, RouteCache, build_route, load_route
from .extractors import CorridorExtractor, find_pois_near_route
from .exporters import GarminExporter
from .overpass import FetchOrchestrator, OverpassClient
from .api import RouteService, parse_radius_km

__all__ = [
    "__version__",
    "Config",
    "RouteCache",
    "build_route",
    "load_route",
    "CorridorExtractor",
    "find_pois_near_route",
    "GarminExporter",
    "FetchOrchestrator",
    "OverpassClient",
    "RouteService",
    "parse_radius_km",
]
