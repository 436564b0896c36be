# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from tourbook.application.services.ratings import RatingsService
from tourbook.application.use_cases.resources.crud import ResourceService
from tourbook.domain.query import exclude
from tourbook.infrastructure.repositories.resources import (
    ReviewRepository,
    UserResourceRepository,
)
from tourbook.shared.logging import logger

HIDE_INACTIVE_USERS = exclude("active", False)


class UserAdminService(ResourceService):
    """Admin user management.

    Deleting a user removes their reviews with them, so every tour they
    reviewed gets its rating summary recomputed afterwards.
    """

    def __init__(
        self,
        *,
        repository: UserResourceRepository,
        reviews: ReviewRepository,
        ratings: RatingsService,
        max_limit: int,
    ) -> None:
        super().__init__(
            repository=repository, max_limit=max_limit, base=(HIDE_INACTIVE_USERS,)
        )
        self._reviews = reviews
        self._ratings = ratings

    def delete(self, resource_id: int) -> dict[str, Any]:
        reviewed = self._reviews.tour_ids_for_user(resource_id)
        deleted = super().delete(resource_id)
        for tour_id in reviewed:
            self._ratings.recompute(tour_id)
        if reviewed:
            logger.info(f"users.delete: id={resource_id} recomputed tours={reviewed}")
        return deleted
