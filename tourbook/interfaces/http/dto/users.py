# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tourbook.domain.users.entities import Role


class UserAdminUpdateDTO(BaseModel):
    """Admin edits; passwords are never changed through this route."""

    name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    photo: str | None = None
    role: Role | None = None

    model_config = ConfigDict(extra="ignore")
