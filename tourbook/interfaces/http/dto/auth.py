# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

MIN_PASSWORD_LENGTH = 8


class SignupRequestDTO(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    password_confirm: str = Field(min_length=1, max_length=128)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please tell us your name!")
        return value


class LoginRequestDTO(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ForgotPasswordRequestDTO(BaseModel):
    email: EmailStr


class ResetPasswordRequestDTO(BaseModel):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    password_confirm: str = Field(min_length=1, max_length=128)


class UpdatePasswordRequestDTO(BaseModel):
    password_current: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    password_confirm: str = Field(min_length=1, max_length=128)


class UpdateMeRequestDTO(BaseModel):
    # password fields are accepted here only so they can be rejected explicitly
    name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    password: str | None = None
    password_confirm: str | None = None

    model_config = ConfigDict(extra="ignore")
