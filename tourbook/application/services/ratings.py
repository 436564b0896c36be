# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from tourbook.domain.tours.ratings import RatingSummary
from tourbook.shared.logging import logger


class RatingSource(Protocol):
    def ratings_for_tour(self, tour_id: int) -> list[float]: ...


class RatingTarget(Protocol):
    def apply_rating_summary(self, tour_id: int, summary: RatingSummary) -> bool: ...


class RatingsService:
    """Keeps a tour's ``ratings_average``/``ratings_quantity`` in step with its reviews.

    Called explicitly by every review write; concurrent writers are last-write-wins.
    """

    def __init__(self, *, reviews: RatingSource, tours: RatingTarget) -> None:
        self._reviews = reviews
        self._tours = tours

    def recompute(self, tour_id: int) -> RatingSummary:
        summary = RatingSummary.from_ratings(self._reviews.ratings_for_tour(tour_id))
        if not self._tours.apply_rating_summary(tour_id, summary):
            logger.warning(f"ratings.recompute: tour {tour_id} not found")
        else:
            logger.debug(
                f"ratings.recompute: tour={tour_id} quantity={summary.quantity} "
                f"average={summary.average}"
            )
        return summary
