# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_RATINGS_AVERAGE = 4.5


@dataclass(slots=True, frozen=True)
class RatingSummary:
    quantity: int
    average: float

    @classmethod
    def from_ratings(cls, ratings: Iterable[float]) -> RatingSummary:
        values = [float(r) for r in ratings]
        if not values:
            return cls(quantity=0, average=DEFAULT_RATINGS_AVERAGE)
        return cls(quantity=len(values), average=round_rating(sum(values) / len(values)))


def round_rating(value: float) -> float:
    # half-up, not banker's rounding
    return math.floor(value * 10 + 0.5) / 10
