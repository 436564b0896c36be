# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from tourbook.application.services.tokens import IssuedToken, JwtTokenService
from tourbook.application.use_cases.users.passwords import ensure_confirmed, password_changed_at
from tourbook.domain.users.entities import User
from tourbook.domain.users.exceptions import UserNoLongerExistsError, WrongPasswordError
from tourbook.domain.users.repositories import PasswordHasher, UserRepository


class UpdatePasswordUseCase:
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
        self,
        user_id: int,
        current_password: str,
        password: str,
        password_confirm: str,
    ) -> tuple[User, IssuedToken]:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNoLongerExistsError()
        if not self._password_hasher.verify(current_password, user.password_hash):
            raise WrongPasswordError()

        ensure_confirmed(password, password_confirm)
        now = datetime.now(UTC)
        user = self._users.save(
            user.with_password(self._password_hasher.hash(password), password_changed_at(now))
        )
        return user, self._tokens.issue(user.id, now)
