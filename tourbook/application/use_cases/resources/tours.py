# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from tourbook.application.use_cases.resources.crud import ResourceService
from tourbook.domain.query import exclude
from tourbook.domain.tours.geo import DistanceUnit, GeoPoint, radius_in_radians
from tourbook.domain.tours.slug import slugify
from tourbook.infrastructure.repositories.resources import TourRepository
from tourbook.shared.errors.base import NotFoundError, ValidationError

HIDE_SECRET_TOURS = exclude("secret_tour", True)

TOP_CHEAP_PARAMS: dict[str, str] = {
    "limit": "5",
    "sort": "-ratings_average,price",
    "fields": "name,price,ratings_average,summary,difficulty",
}


def with_slug(data: dict[str, Any]) -> dict[str, Any]:
    if data.get("name"):
        data["slug"] = slugify(str(data["name"]))
    return data


class TourService(ResourceService):
    def __init__(self, *, repository: TourRepository, max_limit: int) -> None:
        super().__init__(
            repository=repository,
            max_limit=max_limit,
            base=(HIDE_SECRET_TOURS,),
            prepare=with_slug,
        )
        self._tours = repository

    def get(self, resource_id: int) -> dict[str, Any]:
        found = self._tours.get_with_reviews(resource_id, base=self.base)
        if found is None:
            raise NotFoundError()
        return found

    def top_cheap(self) -> list[dict[str, Any]]:
        return self.list(TOP_CHEAP_PARAMS)

    def stats(self) -> list[dict[str, Any]]:
        return self._tours.stats()

    def monthly_plan(self, year: int) -> list[dict[str, Any]]:
        if not 1 <= year <= 9999:
            raise ValidationError("invalid_year", f"Invalid year: {year}.", context={"year": year})
        return self._tours.monthly_plan(year)

    def within(self, distance: str, latlng: str, unit: str) -> list[dict[str, Any]]:
        center = GeoPoint.parse(latlng)
        parsed_unit = DistanceUnit.parse(unit)
        try:
            value = float(distance)
        except ValueError:
            raise ValidationError(
                "invalid_distance", f"Invalid distance: {distance}.", context={"distance": distance}
            ) from None
        if value < 0:
            raise ValidationError(
                "invalid_distance", f"Invalid distance: {distance}.", context={"distance": distance}
            )
        return self._tours.within(center, radius_in_radians(value, parsed_unit), base=self.base)

    def distances(self, latlng: str, unit: str) -> list[dict[str, Any]]:
        return self._tours.distances(GeoPoint.parse(latlng), DistanceUnit.parse(unit))
