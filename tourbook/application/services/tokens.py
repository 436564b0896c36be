# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens (HS256 JWT carrying the user id)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from tourbook.domain.users.exceptions import TokenExpiredError, TokenInvalidError


@dataclass(slots=True, frozen=True)
class IssuedToken:
    token: str
    issued_at: int
    expires_at: int


@dataclass(slots=True, frozen=True)
class TokenClaims:
    user_id: int
    issued_at: int
    expires_at: int


class JwtTokenService:
    def __init__(self, *, secret: str, algorithm: str = "HS256", ttl: timedelta) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, user_id: int, now: datetime | None = None) -> IssuedToken:
        now = now or datetime.now(UTC)
        issued_at = int(now.timestamp())
        expires_at = int((now + self._ttl).timestamp())
        token = jwt.encode(
            {"id": user_id, "iat": issued_at, "exp": expires_at},
            self._secret,
            algorithm=self._algorithm,
        )
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def decode(self, token: str) -> TokenClaims:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat", "id"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError() from None
        except jwt.PyJWTError:
            raise TokenInvalidError() from None

        try:
            return TokenClaims(
                user_id=int(claims["id"]),
                issued_at=int(claims["iat"]),
                expires_at=int(claims["exp"]),
            )
        except (TypeError, ValueError):
            raise TokenInvalidError() from None
