# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreateDTO(BaseModel):
    review: str = Field(min_length=5, max_length=500)
    rating: float = Field(ge=1, le=5)
    tour_id: int | None = None
    user_id: int | None = None

    model_config = ConfigDict(extra="ignore")


class ReviewUpdateDTO(BaseModel):
    review: str | None = Field(None, min_length=5, max_length=500)
    rating: float | None = Field(None, ge=1, le=5)

    model_config = ConfigDict(extra="ignore")
