# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable

from tourbook.application.services.tokens import JwtTokenService
from tourbook.domain.users.entities import Role, User
from tourbook.domain.users.exceptions import (
    PasswordChangedError,
    RoleNotAllowedError,
    TokenMissingError,
    UserNoLongerExistsError,
)
from tourbook.domain.users.repositories import UserRepository


class AuthenticateUseCase:
    """Resolve a bearer/cookie token into the identity it was issued for."""

    def __init__(self, *, users: UserRepository, tokens: JwtTokenService) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, token: str | None) -> User:
        if not token:
            raise TokenMissingError()

        claims = self._tokens.decode(token)

        user = self._users.find_by_id(claims.user_id)
        if user is None or not user.active:
            raise UserNoLongerExistsError()

        if user.changed_password_after(claims.issued_at):
            raise PasswordChangedError()

        return user


def ensure_role(user: User, allowed: Iterable[Role | str]) -> None:
    roles = {Role.parse(role) for role in allowed}
    if user.role not in roles:
        raise RoleNotAllowedError(user.role.value, [role.value for role in roles])
