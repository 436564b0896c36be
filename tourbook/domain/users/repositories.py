# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol

from .entities import User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_reset_token(self, hashed_token: str, now: datetime) -> User | None: ...
    def email_taken(self, email: str) -> bool: ...
    def add(self, user: User) -> User: ...
    def save(self, user: User) -> User: ...
    def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> User | None: ...
    def deactivate(self, user_id: int) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class Notifier(Protocol):
    def send(self, recipient: User, url: str, kind: str) -> None: ...
