"""
Domain service: Boundary geometry (area, perimeter, distance, slope).

Measurements are delegated to a map provider strategy so callers can pick
the geometry backend per engine instance:
- SphericalMapProvider: closed-form spherical formulas on a mean-radius Earth
- ProjectedMapProvider: local UTM projection measured with shapely
"""
from typing import Optional, Protocol, Sequence
from dataclasses import dataclass
import logging

from shapely.geometry import LineString, Point, Polygon

from forge.config import settings
from forge.utils.geo_projection import project_to_meters
from forge.utils.spatial_helpers import (
    EARTH_RADIUS_M,
    haversine_distance,
    max_pairwise_distance,
    ring_segment_lengths,
    spherical_ring_area,
)

logger = logging.getLogger(__name__)

ACRE_IN_SQUARE_METERS = 4046.8564224
"""International acre in square meters"""


class LatLng(Protocol):
    lat: float
    lng: float


def square_meters_to_acres(square_meters: float) -> float:
    return square_meters / ACRE_IN_SQUARE_METERS


def acres_to_square_meters(acres: float) -> float:
    return acres * ACRE_IN_SQUARE_METERS


@dataclass
class FormattedMeasure:
    """A measurement rounded for display, with its unit."""
    value: float
    unit: str


def format_area(square_meters: float) -> FormattedMeasure:
    """Acres (2 dp) for parcels of at least one acre, whole square meters below."""
    acres = square_meters_to_acres(square_meters)
    if acres >= 1:
        return FormattedMeasure(value=round(acres, 2), unit="acres")
    return FormattedMeasure(value=round(square_meters), unit="sq m")


def format_distance(meters: float) -> FormattedMeasure:
    """Kilometers (2 dp) from 1 km up, whole meters below."""
    if meters >= 1000:
        return FormattedMeasure(value=round(meters / 1000, 2), unit="km")
    return FormattedMeasure(value=round(meters), unit="m")


def _as_pairs(points: Sequence[LatLng]) -> list[tuple[float, float]]:
    return [(p.lat, p.lng) for p in points]


class MapProvider(Protocol):
    """Geometry backend used by GeometryEngine."""

    name: str

    def ring_area(self, coordinates: list[tuple[float, float]]) -> float: ...

    def ring_perimeter(self, coordinates: list[tuple[float, float]]) -> float: ...

    def distance(self, start: tuple[float, float], end: tuple[float, float]) -> float: ...


class SphericalMapProvider:
    """Spherical Earth model with a configurable radius."""

    name = "spherical"

    def __init__(self, radius: float = EARTH_RADIUS_M):
        self.radius = radius

    def ring_area(self, coordinates: list[tuple[float, float]]) -> float:
        return spherical_ring_area(coordinates, radius=self.radius)

    def ring_perimeter(self, coordinates: list[tuple[float, float]]) -> float:
        return float(ring_segment_lengths(coordinates, radius=self.radius).sum())

    def distance(self, start: tuple[float, float], end: tuple[float, float]) -> float:
        return haversine_distance(start[0], start[1], end[0], end[1], radius=self.radius)


class ProjectedMapProvider:
    """
    Planar measurements in the parcel's UTM zone.

    More faithful to the WGS84 ellipsoid for small parcels, at the cost of
    a pyproj transform per call.
    """

    name = "projected"

    def ring_area(self, coordinates: list[tuple[float, float]]) -> float:
        return float(Polygon(project_to_meters(coordinates)).area)

    def ring_perimeter(self, coordinates: list[tuple[float, float]]) -> float:
        projected = project_to_meters(coordinates)
        return float(LineString(projected + [projected[0]]).length)

    def distance(self, start: tuple[float, float], end: tuple[float, float]) -> float:
        a, b = project_to_meters([start, end])
        return float(Point(a).distance(Point(b)))


_PROVIDERS = {
    SphericalMapProvider.name: SphericalMapProvider,
    ProjectedMapProvider.name: ProjectedMapProvider,
}


def get_map_provider(name: Optional[str] = None) -> MapProvider:
    """
    Build a map provider by name.

    Args:
        name: Provider name, defaults to ``settings.map_provider``

    Returns:
        A new provider instance

    Raises:
        ValueError: If the name is not a known provider
    """
    name = name or settings.map_provider
    try:
        return _PROVIDERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown map provider '{name}', expected one of {sorted(_PROVIDERS)}"
        ) from None


@dataclass
class PolygonMetrics:
    """Area and perimeter of a boundary, raw and formatted."""
    area_sq_meters: float
    area_acres: float
    perimeter_meters: float
    formatted_area: FormattedMeasure
    formatted_perimeter: FormattedMeasure
    provider: str


class GeometryEngine:
    """
    Domain service turning boundary points into measurements.

    Pure computation: coordinates are not range checked here, non-finite
    input gives non-finite output.
    """

    def __init__(self, provider: Optional[MapProvider] = None):
        self.provider = provider or SphericalMapProvider()

    def compute_area(self, points: Sequence[LatLng]) -> float:
        """
        Area enclosed by the boundary in square meters.

        Args:
            points: Ordered boundary points; the ring is closed implicitly

        Returns:
            Area in m², 0.0 for fewer than three points
        """
        if len(points) < 3:
            return 0.0
        return self.provider.ring_area(_as_pairs(points))

    def compute_area_acres(self, points: Sequence[LatLng]) -> float:
        return square_meters_to_acres(self.compute_area(points))

    def compute_perimeter(self, points: Sequence[LatLng]) -> float:
        """
        Length of the closed boundary in meters.

        A two-point boundary is measured there and back.

        Args:
            points: Ordered boundary points

        Returns:
            Perimeter in meters, 0.0 for fewer than two points
        """
        if len(points) < 2:
            return 0.0
        return self.provider.ring_perimeter(_as_pairs(points))

    def calculate_distance(self, start: LatLng, end: LatLng) -> float:
        """Distance in meters between two points."""
        return self.provider.distance((start.lat, start.lng), (end.lat, end.lng))

    def calculate_metrics(self, points: Sequence[LatLng]) -> PolygonMetrics:
        area = self.compute_area(points)
        perimeter = self.compute_perimeter(points)
        logger.debug(
            f"Measured {len(points)}-point boundary with {self.provider.name}: "
            f"area={area:.1f}m², perimeter={perimeter:.1f}m"
        )
        return PolygonMetrics(
            area_sq_meters=area,
            area_acres=square_meters_to_acres(area),
            perimeter_meters=perimeter,
            formatted_area=format_area(area),
            formatted_perimeter=format_distance(perimeter),
            provider=self.provider.name,
        )

    def estimate_slope(
        self,
        points: Sequence[LatLng],
        elevations: Sequence[float],
    ) -> float:
        """
        Estimate the overall slope of a parcel in percent.

        Uses the elevation range over the widest horizontal span of the
        boundary: (max - min elevation) / span * 100.

        Args:
            points: Boundary points
            elevations: Elevation in meters for each point, same order

        Returns:
            Slope in percent, 0.0 for fewer than two points or zero span

        Raises:
            ValueError: If the elevation count does not match the points
        """
        if len(points) != len(elevations):
            raise ValueError(
                f"Expected {len(points)} elevations, got {len(elevations)}"
            )
        if len(points) < 2:
            return 0.0

        span = max_pairwise_distance(_as_pairs(points), radius=EARTH_RADIUS_M)
        if span == 0:
            return 0.0

        rise = max(elevations) - min(elevations)
        return rise / span * 100
