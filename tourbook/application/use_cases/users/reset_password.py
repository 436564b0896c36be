# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from tourbook.application.services.tokens import IssuedToken, JwtTokenService
from tourbook.application.use_cases.users.passwords import (
    ensure_confirmed,
    hash_reset_token,
    password_changed_at,
)
from tourbook.domain.users.entities import User
from tourbook.domain.users.exceptions import ResetTokenInvalidError
from tourbook.domain.users.repositories import PasswordHasher, UserRepository


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: JwtTokenService,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens

    def execute(
        self, token: str, password: str, password_confirm: str
    ) -> tuple[User, IssuedToken]:
        now = datetime.now(UTC)
        hashed = hash_reset_token(token)
        user = self._users.find_by_reset_token(hashed, now)
        if user is None or not user.reset_token_matches(hashed, now):
            raise ResetTokenInvalidError()

        ensure_confirmed(password, password_confirm)
        user = self._users.save(
            user.with_password(self._password_hasher.hash(password), password_changed_at(now))
        )
        return user, self._tokens.issue(user.id, now)
