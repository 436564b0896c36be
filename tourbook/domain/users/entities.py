# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum


class Role(str, Enum):
    USER = "user"
    GUIDE = "guide"
    LEAD_GUIDE = "lead-guide"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | Role) -> Role:
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unknown role: {value!r}") from None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    password_hash: str
    role: Role = Role.USER
    photo: str = "default.jpg"
    active: bool = True
    password_changed_at: datetime | None = None
    password_reset_token: str | None = None
    password_reset_expires: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role.parse(self.role))

    def changed_password_after(self, issued_at: int) -> bool:
        """True when the password changed after a token issued at ``issued_at`` (epoch seconds)."""
        if self.password_changed_at is None:
            return False
        changed = int(_as_utc(self.password_changed_at).timestamp())
        return issued_at < changed

    def reset_token_matches(self, hashed_token: str, now: datetime) -> bool:
        if not self.password_reset_token or self.password_reset_expires is None:
            return False
        if self.password_reset_token != hashed_token:
            return False
        return _as_utc(self.password_reset_expires) > now

    def with_reset_token(self, hashed_token: str | None, expires: datetime | None) -> User:
        return replace(self, password_reset_token=hashed_token, password_reset_expires=expires)

    def with_password(self, password_hash: str, changed_at: datetime) -> User:
        return replace(
            self,
            password_hash=password_hash,
            password_changed_at=changed_at,
            password_reset_token=None,
            password_reset_expires=None,
        )

    def public_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "photo": self.photo,
            "role": self.role.value,
        }
