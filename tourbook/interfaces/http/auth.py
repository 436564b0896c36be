# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request guards: ``protect``, optional identity and role restriction.

The resolved identity lives on ``flask.g.user`` for the rest of the request.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from tourbook.application.use_cases.users.authenticate import AuthenticateUseCase, ensure_role
from tourbook.domain.users.entities import Role, User
from tourbook.domain.users.exceptions import TokenMissingError
from tourbook.shared.errors.base import AppError
from tourbook.shared.logging import logger, set_log_user

JWT_COOKIE = "jwt"
LOGGED_OUT = "loggedout"

View = Callable[..., Any]


def extract_token() -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    token = request.cookies.get(JWT_COOKIE, "")
    if token and token != LOGGED_OUT:
        return token
    return None


def current_user() -> User:
    user = getattr(g, "user", None)
    if user is None:
        raise TokenMissingError()
    return user


class AuthGuard:
    def __init__(self, authenticate: AuthenticateUseCase) -> None:
        self._authenticate = authenticate

    def protect(self, view: View) -> View:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            g.user = self._authenticate.execute(extract_token())
            set_log_user(g.user.id)
            logger.debug(f"auth.protect: ok {request.method} {request.path}")
            return view(*args, **kwargs)

        return inner

    def optional(self, view: View) -> View:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            g.user = None
            token = extract_token()
            if token:
                try:
                    g.user = self._authenticate.execute(token)
                    set_log_user(g.user.id)
                except AppError as exc:
                    logger.debug(f"auth.optional: anonymous ({exc.code})")
            return view(*args, **kwargs)

        return inner

    def restrict_to(self, *roles: Role | str) -> Callable[[View], View]:
        allowed = tuple(Role.parse(role) for role in roles)

        def decorator(view: View) -> View:
            @wraps(view)
            def inner(*args: Any, **kwargs: Any) -> Any:
                ensure_role(current_user(), allowed)
                return view(*args, **kwargs)

            return inner

        return decorator

    def require(self, *roles: Role | str) -> Callable[[View], View]:
        """``protect`` followed by ``restrict_to(*roles)``; no roles means any identity."""

        def decorator(view: View) -> View:
            if roles:
                view = self.restrict_to(*roles)(view)
            return self.protect(view)

        return decorator


__all__ = ["AuthGuard", "JWT_COOKIE", "LOGGED_OUT", "current_user", "extract_token"]
