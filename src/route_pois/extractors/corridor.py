"""Match Overpass POIs against a route corridor."""

import logging
from math import isfinite
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from ..core import (
    Config,
    GeoPoint,
    Poi,
    PoiCategory,
    Route,
    nearest_point_on_route,
    sample_route_points,
)
from ..core.errors import AllEndpointsExhaustedError, AllSourcesUnavailableError
from ..overpass import FetchOrchestrator, OverpassClient, build_orchestrator

logger = logging.getLogger(__name__)

SAMPLE_STEP_KM = 3.0
BATCH_SIZE = 18

CSV_FIELDS = ['id', 'category', 'name', 'lat', 'lon', 'dist_to_route_km',
              'dist_along_km', 'amenity', 'shop']


def map_tags_to_category(tags: Optional[Dict[str, str]],
                         categories: Optional[Dict[str, Dict[str, List[str]]]] = None
                         ) -> Optional[PoiCategory]:
    """
    Classify an element by its OSM tags.

    Categories are checked in declaration order and the first exact tag
    match wins.

    Args:
        tags: OSM tag mapping (may be None)
        categories: Tag vocabulary per category name (defaults to built-in)

    Returns:
        PoiCategory, or None when no category matches
    """
    if not tags:
        return None

    if categories is None:
        categories = Config.DEFAULT_CATEGORIES

    for name, tag_filters in categories.items():
        category = PoiCategory.from_name(name)
        if category is None:
            continue
        for tag_key, tag_values in tag_filters.items():
            if tags.get(tag_key) in tag_values:
                return category

    return None


def element_coordinates(element: Dict) -> Optional[GeoPoint]:
    """
    Resolve the coordinate of an Overpass element.

    Uses direct lat/lon for nodes, then the ``center`` of ways, then the mean
    of the ``geometry`` vertices. Missing or non-numeric values fall through
    to the next source; vertices without coordinates are ignored.
    """
    point = _as_geo_point(element)
    if point is not None:
        return point

    center = element.get('center')
    if isinstance(center, dict):
        point = _as_geo_point(center)
        if point is not None:
            return point

    geometry = element.get('geometry')
    if isinstance(geometry, list):
        vertices = [p for p in map(_as_geo_point, geometry) if p is not None]
        if vertices:
            return GeoPoint(
                sum(p.lat for p in vertices) / len(vertices),
                sum(p.lon for p in vertices) / len(vertices),
            )

    return None


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and isfinite(value)


def _as_geo_point(data) -> Optional[GeoPoint]:
    if not isinstance(data, dict):
        return None
    lat = data.get('lat')
    lon = data.get('lon')
    if _is_number(lat) and _is_number(lon):
        return GeoPoint(lat, lon)
    return None


def _tag_filter(key: str, values: List[str]) -> str:
    if len(values) == 1:
        return f'["{key}"="{values[0]}"]'
    return f'["{key}"~"^({"|".join(values)})$"]'


def build_overpass_query(points: Sequence, radius_m: int,
                         categories: Optional[Dict[str, Dict[str, List[str]]]] = None) -> str:
    """
    Build an Overpass QL query for POIs around sampled route points.

    Args:
        points: Sampled points (objects with lat and lon)
        radius_m: Search radius around each point in meters
        categories: Tag vocabulary per category name (defaults to built-in).
            Names that are not a PoiCategory are left out of the query.

    Returns:
        Overpass QL query string
    """
    if categories is None:
        categories = Config.DEFAULT_CATEGORIES

    area_clauses = "\n".join(
        f"  node(around:{radius_m},{p.lat},{p.lon});way(around:{radius_m},{p.lat},{p.lon});"
        for p in points
    )

    filters = []
    for name, tag_filters in categories.items():
        if PoiCategory.from_name(name) is None:
            continue
        for key, values in tag_filters.items():
            if values:
                filters.append(_tag_filter(key, values))

    tag_clauses = "\n".join(
        f"  {kind}.all{tag_filter};"
        for kind in ("node", "way")
        for tag_filter in filters
    )

    return (
        "[out:json][timeout:45];\n"
        "(\n"
        f"{area_clauses}\n"
        ")->.all;\n"
        "(\n"
        f"{tag_clauses}\n"
        ");\n"
        "out center tags;"
    )


def chunk(items: Sequence, size: int) -> List[List]:
    """Split a sequence into consecutive lists of at most ``size`` items."""
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def find_pois_near_route(
    route: Route,
    radius_km: float,
    fetch_batch: Callable[[List[GeoPoint], int], List[Dict]],
    sampler: Callable = sample_route_points,
    classifier: Callable[[Dict[str, str]], Optional[PoiCategory]] = map_tags_to_category,
    step_km: float = SAMPLE_STEP_KM,
    batch_size: int = BATCH_SIZE,
) -> List[Poi]:
    """
    Find POIs within ``radius_km`` of a route, ordered along the route.

    The route is sampled every ``step_km`` and the samples are queried in
    batches of ``batch_size``. A batch that fails on every endpoint is
    skipped; the call only fails when no batch succeeds.

    Args:
        route: Route to match against
        radius_km: Maximum distance from the route in kilometers
        fetch_batch: Callable(points, radius_m) returning raw elements, raising
            AllEndpointsExhaustedError when the batch cannot be fetched
        sampler: Callable(points, step_km) thinning the route
        classifier: Callable(tags) returning a PoiCategory or None
        step_km: Sampling step in kilometers
        batch_size: Sampled points per query

    Returns:
        List of Poi sorted by along-route distance

    Raises:
        AllSourcesUnavailableError: If every batch failed
    """
    sampled = [GeoPoint(p.lat, p.lon) for p in sampler(route.points, step_km)]
    batches = chunk(sampled, batch_size)
    radius_m = int(round(radius_km * 1000))

    elements = []
    successful = 0
    for number, batch in enumerate(batches, start=1):
        try:
            batch_elements = fetch_batch(batch, radius_m)
        except AllEndpointsExhaustedError as e:
            logger.warning("Batch %d/%d skipped: %s", number, len(batches), e.last_reason)
            continue
        elements.extend(batch_elements)
        successful += 1
        logger.info("Batch %d/%d: %d elements", number, len(batches), len(batch_elements))

    if successful == 0:
        raise AllSourcesUnavailableError("Overpass unavailable (all endpoints failed)")

    dedup = {}
    for element in elements:
        tags = element.get('tags')
        if not isinstance(tags, dict):
            tags = {}
        category = classifier(tags)
        if category is None:
            continue

        coords = element_coordinates(element)
        if coords is None:
            continue

        nearest = nearest_point_on_route(route.points, coords)
        dist_to_route_km = nearest.distance_meters / 1000
        if dist_to_route_km > radius_km:
            continue

        key = f"{element.get('type')}/{element.get('id')}"
        dedup[key] = Poi(
            id=key,
            category=category,
            name=tags.get('name') or f"Unnamed {category.value}",
            lat=coords.lat,
            lon=coords.lon,
            tags=dict(tags),
            dist_to_route_km=round(dist_to_route_km, 2),
            dist_along_km=round(nearest.dist_along_km, 2),
        )

    return sorted(dedup.values(), key=lambda poi: poi.dist_along_km)


def category_breakdown(pois: Sequence[Poi]) -> Dict[str, int]:
    """Count POIs per category."""
    counts = {}
    for poi in pois:
        counts[poi.category.value] = counts.get(poi.category.value, 0) + 1
    return dict(sorted(counts.items()))


def pois_to_dataframe(pois: Sequence[Poi]) -> pd.DataFrame:
    """Tabulate POIs with the CSV columns."""
    rows = [{
        'id': poi.id,
        'category': poi.category.value,
        'name': poi.name,
        'lat': poi.lat,
        'lon': poi.lon,
        'dist_to_route_km': poi.dist_to_route_km,
        'dist_along_km': poi.dist_along_km,
        'amenity': poi.tags.get('amenity', ''),
        'shop': poi.tags.get('shop', ''),
    } for poi in pois]
    return pd.DataFrame(rows, columns=CSV_FIELDS)


def save_pois_to_csv(pois: Sequence[Poi], output_file: str) -> str:
    """
    Save POIs to CSV file.

    Args:
        pois: POIs to write
        output_file: Path to output CSV file

    Returns:
        Path to output file
    """
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    pois_to_dataframe(pois).to_csv(output_path, index=False, encoding='utf-8')
    logger.info("Saved %d POIs to %s", len(pois), output_path)
    return str(output_path)


class CorridorExtractor:
    """Extract POIs along a route using the Overpass API."""

    def __init__(self, config: Optional[Config] = None,
                 orchestrator: Optional[FetchOrchestrator] = None):
        """
        Initialize CorridorExtractor.

        Args:
            config: Configuration object (uses defaults if None)
            orchestrator: Fetch orchestrator (built from config if None, in
                which case the extractor owns its HTTP client)
        """
        self.config = config or Config()
        self.client: Optional[OverpassClient] = None
        if orchestrator is None:
            self.client = OverpassClient(timeout=self.config.timeout)
            orchestrator = build_orchestrator(self.config, self.client)
        self.orchestrator = orchestrator

    def fetch_batch(self, points: List[GeoPoint], radius_m: int) -> List[Dict]:
        """Query one batch of sampled points through the orchestrator."""
        query = build_overpass_query(points, radius_m, self.config.get_categories())
        return self.orchestrator.fetch(query)

    def classify(self, tags: Dict[str, str]) -> Optional[PoiCategory]:
        return map_tags_to_category(tags, self.config.get_categories())

    def extract(self, route: Route, radius_km: Optional[float] = None) -> List[Poi]:
        """
        Extract POIs along a route.

        Args:
            route: Route to match against
            radius_km: Corridor half-width in km (config default if None)

        Returns:
            List of Poi sorted by along-route distance
        """
        if radius_km is None:
            radius_km = self.config.default_radius_km

        logger.info("Searching POIs within %.1f km of '%s'", radius_km, route.name)
        pois = find_pois_near_route(
            route,
            radius_km,
            self.fetch_batch,
            classifier=self.classify,
            step_km=self.config.step_km,
            batch_size=self.config.batch_size,
        )
        logger.info("%d POIs along route", len(pois))
        return pois

    def close(self):
        """Close the HTTP client created by this extractor, if any."""
        if self.client is not None:
            self.client.close()
            self.client = None
