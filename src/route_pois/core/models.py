"""Data models for routes and points of interest."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class PoiCategory(str, Enum):
    """Categories of POIs matched along a route."""

    WATER = "water"
    BAR = "bar"
    FOOD_SHOP = "food_shop"

    @classmethod
    def from_name(cls, name: str) -> Optional["PoiCategory"]:
        """Look up a category by its value, returning None when unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class GeoPoint:
    """A bare coordinate used to query a route."""

    lat: float
    lon: float


@dataclass(frozen=True)
class RawTrackPoint:
    """A track sample as read from the source file, before distances are known."""

    lat: float
    lon: float
    ele: float = 0.0


@dataclass(frozen=True)
class RoutePoint:
    """A route sample annotated with its cumulative distance from the start."""

    lat: float
    lon: float
    ele: float
    dist_km: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon, "ele": self.ele, "distKm": self.dist_km}


@dataclass(frozen=True)
class RouteStats:
    """Distance and elevation summary of a route."""

    distance_km: float
    gain_m: int
    loss_m: int
    min_ele: float
    max_ele: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "distanceKm": self.distance_km,
            "gainM": self.gain_m,
            "lossM": self.loss_m,
            "minEle": self.min_ele,
            "maxEle": self.max_ele,
        }


@dataclass(frozen=True)
class Route:
    """A normalized, distance-annotated GPS track."""

    name: str
    points: Tuple[RoutePoint, ...]
    stats: RouteStats

    def __repr__(self) -> str:
        return (
            f"Route(name='{self.name}', points={len(self.points)}, "
            f"distance={self.stats.distance_km:.1f}km)"
        )

    def to_dict(self) -> Dict:
        """Render the route payload."""
        return {
            "routeName": self.name,
            "points": [point.to_dict() for point in self.points],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class NearestOnRoute:
    """Result of snapping a coordinate onto a route."""

    index: int
    distance_meters: float
    dist_along_km: float


@dataclass(frozen=True)
class Poi:
    """A point of interest matched against a route."""

    id: str
    category: PoiCategory
    name: str
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    dist_to_route_km: float = 0.0
    dist_along_km: float = 0.0

    def __repr__(self) -> str:
        return (
            f"Poi(id={self.id}, category={self.category.value}, "
            f"name='{self.name}', km={self.dist_along_km:.2f})"
        )

    def to_dict(self) -> Dict:
        """Render the POI payload."""
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "lat": self.lat,
            "lon": self.lon,
            "tags": dict(self.tags),
            "distToTraceKm": self.dist_to_route_km,
            "nearestTraceDistKm": self.dist_along_km,
        }
