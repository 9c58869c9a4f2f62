"""Great-circle helpers for proximity search.

Distances use the haversine formula on a sphere with the IUGG mean Earth
radius, which stays within ~0.5% of the WGS84 ellipsoid at city scale.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6_371_008.8


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class BoundingBox:
    """Latitude band plus one or two longitude ranges covering a circle.

    ``longitude_ranges`` is empty when the circle reaches a pole, meaning any
    longitude qualifies.
    """

    min_latitude: float
    max_latitude: float
    longitude_ranges: tuple[tuple[float, float], ...]


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between two points in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Clamp guards against rounding pushing h marginally past 1.
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, max(0.0, h))))


def bounding_box(center: Coordinate, radius_m: float) -> BoundingBox:
    """Return a box that contains every point within ``radius_m`` of ``center``.

    The box is a superset; callers still filter on exact distance.
    """
    angular = radius_m / EARTH_RADIUS_METERS
    lat = math.radians(center.latitude)
    lon = math.radians(center.longitude)

    min_lat = lat - angular
    max_lat = lat + angular
    if min_lat <= -math.pi / 2 or max_lat >= math.pi / 2:
        return BoundingBox(
            min_latitude=max(-90.0, math.degrees(min_lat)),
            max_latitude=min(90.0, math.degrees(max_lat)),
            longitude_ranges=(),
        )

    d_lon = math.asin(min(1.0, math.sin(angular) / math.cos(lat)))
    min_lon = math.degrees(lon - d_lon)
    max_lon = math.degrees(lon + d_lon)

    if min_lon < -180.0:
        ranges = ((min_lon + 360.0, 180.0), (-180.0, max_lon))
    elif max_lon > 180.0:
        ranges = ((min_lon, 180.0), (-180.0, max_lon - 360.0))
    else:
        ranges = ((min_lon, max_lon),)

    return BoundingBox(
        min_latitude=math.degrees(min_lat),
        max_latitude=math.degrees(max_lat),
        longitude_ranges=ranges,
    )
