# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from tourbook.shared.errors.base import ValidationError

EARTH_RADIUS_METERS = 6_378_100.0


class DistanceUnit(str, Enum):
    MILES = "mi"
    KILOMETERS = "km"

    @property
    def earth_radius(self) -> float:
        return 3963.2 if self is DistanceUnit.MILES else 6378.1

    @property
    def meters_multiplier(self) -> float:
        return 0.000621371 if self is DistanceUnit.MILES else 0.001

    @classmethod
    def parse(cls, value: str) -> DistanceUnit:
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                "invalid_unit", "Unit must be either 'mi' or 'km'.", context={"unit": value}
            ) from None


@dataclass(slots=True, frozen=True)
class GeoPoint:
    lat: float
    lng: float

    @classmethod
    def parse(cls, latlng: str) -> GeoPoint:
        """Parse a ``"lat,lng"`` path segment."""
        parts = [part.strip() for part in (latlng or "").split(",")]
        if len(parts) != 2 or not all(parts):
            raise ValidationError(
                "invalid_latlng",
                "Please provide latitude and longitude in the format lat,lng.",
                context={"latlng": latlng},
            )
        try:
            lat, lng = float(parts[0]), float(parts[1])
        except ValueError:
            raise ValidationError(
                "invalid_latlng",
                "Please provide latitude and longitude in the format lat,lng.",
                context={"latlng": latlng},
            ) from None
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            raise ValidationError(
                "invalid_latlng", "Latitude or longitude out of range.", context={"latlng": latlng}
            )
        return cls(lat=lat, lng=lng)

    @classmethod
    def from_geojson(cls, value: dict | None) -> GeoPoint | None:
        if not value:
            return None
        coordinates = value.get("coordinates") or []
        if len(coordinates) < 2:
            return None
        # GeoJSON stores [lng, lat]
        return cls(lat=float(coordinates[1]), lng=float(coordinates[0]))


def central_angle(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle angle between two points in radians (haversine)."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = phi2 - phi1
    d_lambda = math.radians(b.lng - a.lng)
    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * math.asin(min(1.0, math.sqrt(h)))


def radius_in_radians(distance: float, unit: DistanceUnit) -> float:
    return distance / unit.earth_radius


def within_sphere(center: GeoPoint, point: GeoPoint, radius: float) -> bool:
    return central_angle(center, point) <= radius


def distance_in_unit(a: GeoPoint, b: GeoPoint, unit: DistanceUnit) -> float:
    return central_angle(a, b) * EARTH_RADIUS_METERS * unit.meters_multiplier
