"""Great-circle distance between coordinates (haversine)."""

import math
from typing import Iterable

import numpy as np

from services.errors import InvalidCoordinateError

EARTH_RADIUS_KM = 6371.0


def validate_coordinate(latitude: float, longitude: float) -> None:
    """Raise InvalidCoordinateError unless |lat| <= 90 and |lon| <= 180."""
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinateError(latitude, longitude)
    if abs(latitude) > 90 or abs(longitude) > 180:
        raise InvalidCoordinateError(latitude, longitude)


def distance_km(lat_a: float, lon_a: float, lat_b: float, lon_b: float) -> float:
    """Haversine distance in kilometres. Symmetric, 0 for identical points."""
    validate_coordinate(lat_a, lon_a)
    validate_coordinate(lat_b, lon_b)
    if lat_a == lat_b and lon_a == lon_b:
        return 0.0

    phi_a, phi_b = math.radians(lat_a), math.radians(lat_b)
    d_phi = phi_b - phi_a
    d_lambda = math.radians(lon_b - lon_a)
    h = math.sin(d_phi / 2) ** 2 + math.cos(phi_a) * math.cos(phi_b) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def nearest_distance_km(
    latitude: float,
    longitude: float,
    points: Iterable[tuple[float | None, float | None]],
) -> float | None:
    """Minimum distance from one coordinate to any of several points.

    Points with missing or out-of-range coordinates are skipped. Returns
    None when no usable point remains.
    """
    validate_coordinate(latitude, longitude)

    valid: list[tuple[float, float]] = []
    for lat, lon in points:
        if lat is None or lon is None:
            continue
        try:
            validate_coordinate(lat, lon)
        except InvalidCoordinateError:
            continue
        valid.append((lat, lon))
    if not valid:
        return None

    arr = np.radians(np.array(valid, dtype=float))
    phi_a = math.radians(latitude)
    lambda_a = math.radians(longitude)
    d_phi = arr[:, 0] - phi_a
    d_lambda = arr[:, 1] - lambda_a
    h = np.sin(d_phi / 2) ** 2 + math.cos(phi_a) * np.cos(arr[:, 0]) * np.sin(d_lambda / 2) ** 2
    h = np.clip(h, 0.0, 1.0)
    distances = 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(h))
    return float(distances.min())
