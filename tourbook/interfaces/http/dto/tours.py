# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Difficulty = Literal["easy", "medium", "difficult"]


class GeoLocationDTO(BaseModel):
    type: Literal["Point"] = "Point"
    # GeoJSON order: [lng, lat]
    coordinates: list[float] = Field(min_length=2, max_length=2)
    address: str | None = None
    description: str | None = None
    day: int | None = Field(None, ge=0)

    @field_validator("coordinates")
    @classmethod
    def _check_range(cls, value: list[float]) -> list[float]:
        lng, lat = value
        if not (-180.0 <= lng <= 180.0 and -90.0 <= lat <= 90.0):
            raise ValueError("coordinates must be [lng, lat] within range")
        return value


class _TourFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("name", "summary", "description", check_fields=False)
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _discount_below_price(self):
        price = getattr(self, "price", None)
        discount = getattr(self, "price_discount", None)
        if price is not None and discount is not None and discount >= price:
            raise ValueError(f"Discount price ({discount}) should be below regular price")
        return self


class TourCreateDTO(_TourFields):
    name: str = Field(min_length=10, max_length=40)
    duration: int = Field(gt=0)
    max_group_size: int = Field(gt=0)
    difficulty: Difficulty
    ratings_average: float = Field(4.5, ge=1, le=5)
    ratings_quantity: int = Field(0, ge=0)
    price: float = Field(gt=0)
    price_discount: float | None = Field(None, ge=0)
    summary: str = Field(min_length=1)
    description: str | None = None
    image_cover: str = Field(min_length=1)
    images: list[str] = Field(default_factory=list)
    start_dates: list[datetime] = Field(default_factory=list)
    secret_tour: bool = False
    start_location: GeoLocationDTO | None = None
    locations: list[GeoLocationDTO] = Field(default_factory=list)
    guides: list[int] = Field(default_factory=list)


class TourUpdateDTO(_TourFields):
    name: str | None = Field(None, min_length=10, max_length=40)
    duration: int | None = Field(None, gt=0)
    max_group_size: int | None = Field(None, gt=0)
    difficulty: Difficulty | None = None
    ratings_average: float | None = Field(None, ge=1, le=5)
    ratings_quantity: int | None = Field(None, ge=0)
    price: float | None = Field(None, gt=0)
    price_discount: float | None = Field(None, ge=0)
    summary: str | None = Field(None, min_length=1)
    description: str | None = None
    image_cover: str | None = Field(None, min_length=1)
    images: list[str] | None = None
    start_dates: list[datetime] | None = None
    secret_tour: bool | None = None
    start_location: GeoLocationDTO | None = None
    locations: list[GeoLocationDTO] | None = None
    guides: list[int] | None = None
