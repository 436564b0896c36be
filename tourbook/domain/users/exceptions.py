# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable

from tourbook.shared.errors.base import (
    AuthenticationError,
    AuthorizationError,
    DeliveryError,
    NotFoundError,
    ValidationError,
)


class InvalidCredentialsError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("invalid_credentials", "Incorrect email or password!")


class TokenMissingError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("token_missing", "You are not logged in! Please log in to get access.")


class TokenInvalidError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("token_invalid", "Invalid token. Please log in again!")


class TokenExpiredError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("token_expired", "Your token has expired! Please log in again.")


class UserNoLongerExistsError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__(
            "user_not_found", "The user belonging to this token no longer exists."
        )


class PasswordChangedError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__(
            "password_changed", "User recently changed password! Please log in again."
        )


class ResetTokenInvalidError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("reset_token_invalid", "Token is invalid or has expired.")


class WrongPasswordError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("wrong_password", "Your current password is wrong.")


class RoleNotAllowedError(AuthorizationError):
    def __init__(self, role: str, allowed: Iterable[str]) -> None:
        super().__init__(
            "role_not_allowed",
            "You do not have permission to perform this action.",
            context={"role": role, "allowed": sorted(allowed)},
        )


class PasswordMismatchError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            "password_mismatch",
            "Invalid input data. Passwords are not the same!",
            context={"fields": ["password_confirm"]},
        )


class EmailTakenError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            "duplicate_field",
            "Duplicate field value: email. Please use another value!",
            context={"fields": ["email"]},
        )


class PasswordFieldNotAllowedError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            "password_update_not_allowed",
            "This route is not for password updates. Please use /update-my-password.",
        )


class EmailNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("user_not_found", "There is no user with that email address.")


class ResetEmailDeliveryError(DeliveryError):
    def __init__(self) -> None:
        super().__init__(
            "reset_email_failed", "There was an error sending the email. Try again later!"
        )
