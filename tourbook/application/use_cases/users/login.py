# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tourbook.application.services.tokens import IssuedToken, JwtTokenService
from tourbook.domain.users.entities import User
from tourbook.domain.users.exceptions import InvalidCredentialsError
from tourbook.domain.users.repositories import PasswordHasher, UserRepository


class LoginUseCase:
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

    def execute(self, email: str, password: str) -> tuple[User, IssuedToken]:
        user = self._users.find_by_email(email)
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )
        if not password_valid:
            raise InvalidCredentialsError()
        return user, self._tokens.issue(user.id)
