# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tourbook.application.services.ratings import RatingsService
from tourbook.application.use_cases.resources.crud import ResourceService
from tourbook.infrastructure.repositories.resources import ReviewRepository, TourRepository
from tourbook.shared.errors.base import NotFoundError


class ReviewService(ResourceService):
    """Review CRUD whose every write refreshes the parent tour's rating summary."""

    def __init__(
        self,
        *,
        repository: ReviewRepository,
        tours: TourRepository,
        ratings: RatingsService,
        max_limit: int,
    ) -> None:
        super().__init__(repository=repository, max_limit=max_limit)
        self._tours = tours
        self._ratings = ratings

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        tour_id = data.get("tour_id")
        if tour_id is None or self._tours.get(int(tour_id)) is None:
            raise NotFoundError("tour_not_found", "No tour found with that ID.")
        created = super().create(data)
        self._ratings.recompute(created["tour_id"])
        return created

    def update(self, resource_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        before = self.get(resource_id)
        updated = super().update(resource_id, data)
        self._ratings.recompute(updated["tour_id"])
        if before["tour_id"] != updated["tour_id"]:
            self._ratings.recompute(before["tour_id"])
        return updated

    def delete(self, resource_id: int) -> dict[str, Any]:
        deleted = super().delete(resource_id)
        self._ratings.recompute(deleted["tour_id"])
        return deleted
