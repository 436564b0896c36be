# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta

from tourbook.domain.users.exceptions import PasswordMismatchError

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(minutes=10)
# tokens issued in the same second as the change stay valid
PASSWORD_CHANGE_SKEW = timedelta(seconds=1)


def new_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def ensure_confirmed(password: str, password_confirm: str) -> None:
    if password != password_confirm:
        raise PasswordMismatchError()


def password_changed_at(now: datetime) -> datetime:
    return now - PASSWORD_CHANGE_SKEW
