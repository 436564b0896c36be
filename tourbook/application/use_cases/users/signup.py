# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from tourbook.application.services.tokens import IssuedToken, JwtTokenService
from tourbook.application.use_cases.users.passwords import ensure_confirmed
from tourbook.domain.users.entities import Role, User
from tourbook.domain.users.exceptions import EmailTakenError
from tourbook.domain.users.repositories import Notifier, PasswordHasher, UserRepository
from tourbook.shared.logging import logger


class SignupUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: JwtTokenService,
        notifier: Notifier,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._notifier = notifier

    def execute(
        self,
        name: str,
        email: str,
        password: str,
        password_confirm: str,
        *,
        welcome_url: str,
    ) -> tuple[User, IssuedToken]:
        ensure_confirmed(password, password_confirm)
        email = email.strip().lower()
        if self._users.email_taken(email):
            raise EmailTakenError()

        user = User(
            id=0,
            name=name.strip(),
            email=email,
            password_hash=self._password_hasher.hash(password),
            role=Role.USER,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)

        try:
            self._notifier.send(persisted, welcome_url, "welcome")
        except Exception as exc:
            logger.warning(f"auth.signup: welcome email failed user_id={persisted.id}: {exc}")

        return persisted, self._tokens.issue(persisted.id)
