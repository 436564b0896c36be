# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BookingCreateDTO(BaseModel):
    tour_id: int
    user_id: int
    price: float = Field(gt=0)
    paid: bool = True

    model_config = ConfigDict(extra="ignore")


class BookingUpdateDTO(BaseModel):
    tour_id: int | None = None
    user_id: int | None = None
    price: float | None = Field(None, gt=0)
    paid: bool | None = None

    model_config = ConfigDict(extra="ignore")
