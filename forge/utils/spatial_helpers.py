"""
Spherical geometry helper functions.

Provides utilities for:
- Great-circle (haversine) distances
- Spherical polygon area over a closed ring
- Ring perimeter and pairwise spans
"""
import numpy as np
import logging

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0
"""Mean Earth radius in meters"""


def to_radian_arrays(
    coordinates: list[tuple[float, float]]
) -> tuple[np.ndarray, np.ndarray]:
    """
    Split (latitude, longitude) pairs into radian arrays.

    Args:
        coordinates: List of (latitude, longitude) tuples in degrees

    Returns:
        Tuple of (latitudes, longitudes) as radian arrays
    """
    points = np.radians(np.asarray(coordinates, dtype=float).reshape(-1, 2))
    return points[:, 0], points[:, 1]


def haversine_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    radius: float = EARTH_RADIUS_M,
) -> float:
    """
    Great-circle distance between two points.

    Args:
        lat1, lng1: First point in degrees
        lat2, lng2: Second point in degrees
        radius: Sphere radius in meters

    Returns:
        Distance in meters
    """
    phi1, phi2 = np.radians(lat1), np.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = np.radians(lng2 - lng1)

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(radius * c)


def ring_segment_lengths(
    coordinates: list[tuple[float, float]],
    radius: float = EARTH_RADIUS_M,
) -> np.ndarray:
    """
    Haversine length of every edge of a closed ring.

    The last point is joined back to the first.

    Args:
        coordinates: Ordered (latitude, longitude) tuples in degrees
        radius: Sphere radius in meters

    Returns:
        Array of edge lengths in meters, one per vertex
    """
    lat, lng = to_radian_arrays(coordinates)
    next_lat, next_lng = np.roll(lat, -1), np.roll(lng, -1)

    a = (
        np.sin((next_lat - lat) / 2) ** 2
        + np.cos(lat) * np.cos(next_lat) * np.sin((next_lng - lng) / 2) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return radius * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def spherical_ring_area(
    coordinates: list[tuple[float, float]],
    radius: float = EARTH_RADIUS_M,
) -> float:
    """
    Area enclosed by a closed ring on a sphere.

    Sums (lng2 - lng1) * (2 + sin(lat1) + sin(lat2)) over every edge and
    scales by radius² / 2. Valid for rings that do not cross the
    antimeridian or enclose a pole.

    Args:
        coordinates: Ordered (latitude, longitude) tuples in degrees
        radius: Sphere radius in meters

    Returns:
        Area in square meters (non-negative)
    """
    lat, lng = to_radian_arrays(coordinates)
    next_lat, next_lng = np.roll(lat, -1), np.roll(lng, -1)

    total = np.sum((next_lng - lng) * (2 + np.sin(lat) + np.sin(next_lat)))
    return float(abs(total * radius * radius / 2))


def max_pairwise_distance(
    coordinates: list[tuple[float, float]],
    radius: float = EARTH_RADIUS_M,
) -> float:
    """
    Largest great-circle distance between any two points.

    Args:
        coordinates: (latitude, longitude) tuples in degrees
        radius: Sphere radius in meters

    Returns:
        Distance in meters, 0.0 for fewer than two points
    """
    lat, lng = to_radian_arrays(coordinates)
    if len(lat) < 2:
        return 0.0

    d_phi = lat[:, None] - lat[None, :]
    d_lambda = lng[:, None] - lng[None, :]
    a = (
        np.sin(d_phi / 2) ** 2
        + np.cos(lat)[:, None] * np.cos(lat)[None, :] * np.sin(d_lambda / 2) ** 2
    )
    # Rounding can push a fraction of a ulp past 1
    a = np.clip(a, 0.0, 1.0)
    distances = radius * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(np.max(distances))
