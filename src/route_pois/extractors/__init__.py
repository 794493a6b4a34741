"""POI extraction along a route."""

from .corridor import (
    CorridorExtractor,
    build_overpass_query,
    category_breakdown,
    element_coordinates,
    find_pois_near_route,
    map_tags_to_category,
    pois_to_dataframe,
    save_pois_to_csv,
)

__all__ = [
    "CorridorExtractor",
    "build_overpass_query",
    "category_breakdown",
    "element_coordinates",
    "find_pois_near_route",
    "map_tags_to_category",
    "pois_to_dataframe",
    "save_pois_to_csv",
]
