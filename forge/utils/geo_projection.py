"""
Geospatial projection utilities for coordinate transformations.
"""
from typing import Tuple, List
from pyproj import Transformer


def get_utm_zone(longitude: float) -> int:
    """
    Calculate the UTM zone number from longitude.

    Args:
        longitude: Longitude in degrees

    Returns:
        UTM zone number (1-60)
    """
    return min(int((longitude + 180) / 6) + 1, 60)


def get_utm_crs(longitude: float, latitude: float) -> str:
    """
    Get the appropriate UTM CRS (Coordinate Reference System) for a location.

    Args:
        longitude: Longitude in degrees
        latitude: Latitude in degrees

    Returns:
        EPSG code for the UTM zone
    """
    zone = get_utm_zone(longitude)
    # Northern hemisphere: EPSG:326XX, Southern hemisphere: EPSG:327XX
    hemisphere = "6" if latitude >= 0 else "7"
    return f"EPSG:32{hemisphere}{zone:02d}"


def get_transformer(coordinates: List[Tuple[float, float]]) -> Transformer:
    """
    Build a WGS84 -> UTM transformer centred on a set of points.

    The zone is chosen from the mean position so a parcel straddling a
    zone edge is projected into the zone holding most of it.

    Args:
        coordinates: List of (latitude, longitude) tuples in degrees

    Returns:
        Transformer taking (lon, lat) to (x, y) meters
    """
    if not coordinates:
        raise ValueError("Coordinates list cannot be empty")

    mean_lat = sum(lat for lat, _ in coordinates) / len(coordinates)
    mean_lon = sum(lon for _, lon in coordinates) / len(coordinates)

    return Transformer.from_crs(
        "EPSG:4326",  # WGS84 (lat/lon)
        get_utm_crs(mean_lon, mean_lat),
        always_xy=True  # Ensure (lon, lat) -> (x, y) order
    )


def project_to_meters(
    coordinates: List[Tuple[float, float]]
) -> List[Tuple[float, float]]:
    """
    Project lat/lon coordinates to a planar coordinate system (UTM) in meters.

    Args:
        coordinates: List of (latitude, longitude) tuples in degrees

    Returns:
        List of (x, y) coordinates in meters
    """
    transformer = get_transformer(coordinates)
    return [transformer.transform(lon, lat) for lat, lon in coordinates]
