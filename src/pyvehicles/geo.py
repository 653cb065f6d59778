"""Spherical-Earth geometry helpers.

Bounding coordinates follow the method described at
http://janmatuschek.de/LatitudeLongitudeBoundingCoordinates and
https://www.movable-type.co.uk/scripts/latlong-db.html.

Longitudes are not wrapped at the antimeridian: a box around a point near
+/-180 degrees does not extend to the other side, so vehicles just across
the antimeridian are not found.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyvehicles._constants import EARTH_RADIUS_M
from pyvehicles.models.location import Location

_HALF_PI = math.pi / 2


def angular_radius(radius_m: float) -> float:
    """Convert a surface distance in metres to an angle in radians."""
    return radius_m / EARTH_RADIUS_M


def central_angle(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Angle in radians between two points given in radians (spherical law of cosines)."""
    cos_angle = math.sin(lat1) * math.sin(lat2) + math.cos(lat1) * math.cos(lat2) * math.cos(lng2 - lng1)
    # Rounding can push the cosine slightly outside acos' domain for (near-)identical points.
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def great_circle_distance(a: Location, b: Location) -> float:
    """Great-circle distance in metres between two locations."""
    return central_angle(a.lat_rad, a.lng_rad, b.lat_rad, b.lng_rad) * EARTH_RADIUS_M


def longitude_delta(lat_rad: float, angle: float) -> float | None:
    """Half-width in radians of the longitude range covering a circle.

    Returns ``None`` when the circle covers a pole (or a quarter of the globe
    or more), in which case every longitude is inside the box.
    """
    if angle >= _HALF_PI:
        return None
    if lat_rad + angle >= _HALF_PI or lat_rad - angle <= -_HALF_PI:
        return None
    ratio = math.sin(angle) / math.cos(lat_rad)
    if ratio >= 1.0:
        return None
    return math.asin(ratio)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Latitude/longitude range (radians) enclosing a circle on the sphere.

    The box is a superset of the circle: it may admit points near its
    corners that are farther than the radius, but never rejects one that is
    closer. ``lng_min``/``lng_max`` are ``None`` when longitude is
    unconstrained.
    """

    lat_min: float
    lat_max: float
    lng_min: float | None
    lng_max: float | None

    @classmethod
    def around(cls, center: Location, radius_m: float) -> BoundingBox:
        angle = angular_radius(radius_m)
        lat = center.lat_rad
        lat_min = max(lat - angle, -_HALF_PI)
        lat_max = min(lat + angle, _HALF_PI)
        delta = longitude_delta(lat, angle)
        if delta is None:
            return cls(lat_min=lat_min, lat_max=lat_max, lng_min=None, lng_max=None)
        lng = center.lng_rad
        return cls(lat_min=lat_min, lat_max=lat_max, lng_min=lng - delta, lng_max=lng + delta)

    @property
    def covers_all_longitudes(self) -> bool:
        return self.lng_min is None

    def contains_radians(self, lat_rad: float, lng_rad: float) -> bool:
        if not self.lat_min <= lat_rad <= self.lat_max:
            return False
        if self.lng_min is None or self.lng_max is None:
            return True
        return self.lng_min <= lng_rad <= self.lng_max

    def contains(self, location: Location) -> bool:
        return self.contains_radians(location.lat_rad, location.lng_rad)
