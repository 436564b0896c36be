# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tourbook.domain.users.entities import User
from tourbook.domain.users.exceptions import (
    EmailTakenError,
    PasswordFieldNotAllowedError,
    UserNoLongerExistsError,
)
from tourbook.domain.users.repositories import UserRepository

PASSWORD_FIELDS = frozenset({"password", "password_confirm"})
PROFILE_FIELDS = ("name", "email")


class UpdateProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user: User, changes: Mapping[str, Any]) -> User:
        if PASSWORD_FIELDS & set(changes):
            raise PasswordFieldNotAllowedError()

        allowed = {key: changes[key] for key in PROFILE_FIELDS if changes.get(key) is not None}
        email = allowed.get("email")
        if email is not None:
            allowed["email"] = str(email).strip().lower()
            if allowed["email"] != user.email and self._users.email_taken(allowed["email"]):
                raise EmailTakenError()

        updated = self._users.update_profile(user.id, allowed)
        if updated is None:
            raise UserNoLongerExistsError()
        return updated


class DeactivateUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user: User) -> None:
        self._users.deactivate(user.id)
