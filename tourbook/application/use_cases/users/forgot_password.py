# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from tourbook.application.use_cases.users.passwords import (
    RESET_TOKEN_TTL,
    hash_reset_token,
    new_reset_token,
)
from tourbook.domain.users.exceptions import EmailNotFoundError, ResetEmailDeliveryError
from tourbook.domain.users.repositories import Notifier, UserRepository
from tourbook.shared.logging import logger

RESET_PATH = "/api/v1/users/reset-password/"


class ForgotPasswordUseCase:
    """Issue a single-use reset token and mail its URL.

    Only the sha256 of the token is stored. If delivery fails the token is
    cleared again so no dangling reset window remains.
    """

    def __init__(self, *, users: UserRepository, notifier: Notifier) -> None:
        self._users = users
        self._notifier = notifier

    def execute(self, email: str, *, base_url: str) -> str:
        user = self._users.find_by_email(email)
        if user is None:
            raise EmailNotFoundError()

        token = new_reset_token()
        expires = datetime.now(UTC) + RESET_TOKEN_TTL
        user = self._users.save(user.with_reset_token(hash_reset_token(token), expires))

        url = f"{base_url.rstrip('/')}{RESET_PATH}{token}"
        try:
            self._notifier.send(user, url, "password_reset")
        except Exception as exc:
            logger.error(f"auth.forgot_password: delivery failed user_id={user.id}: {exc}")
            self._users.save(user.with_reset_token(None, None))
            raise ResetEmailDeliveryError() from exc

        logger.info(f"auth.forgot_password: token sent user_id={user.id}")
        return url
