# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = ""
    context: Mapping[str, Any] | None = None
    operational: bool = True

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    @property
    def outcome(self) -> str:
        return "fail" if 400 <= int(self.status) < 500 else "error"

    def to_dict(self, *, verbose: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.outcome, "error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context and (verbose or int(self.status) == HTTPStatus.UNPROCESSABLE_ENTITY):
            payload["context"] = dict(self.context)
        return payload


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        message: str = "Invalid input data.",
        *,
        status: HTTPStatus = HTTPStatus.BAD_REQUEST,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, message=message, context=context)


class AuthenticationError(AppError):
    def __init__(
        self,
        code: str = "unauthenticated",
        message: str = "You are not logged in! Please log in to get access.",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code, status=HTTPStatus.UNAUTHORIZED, message=message, context=context
        )


class AuthorizationError(AppError):
    def __init__(
        self,
        code: str = "forbidden",
        message: str = "You do not have permission to perform this action.",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=HTTPStatus.FORBIDDEN, message=message, context=context)


class NotFoundError(AppError):
    def __init__(
        self,
        code: str = "not_found",
        message: str = "No document found with that ID.",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=HTTPStatus.NOT_FOUND, message=message, context=context)


class DeliveryError(AppError):
    def __init__(
        self,
        code: str = "delivery_failed",
        message: str = "There was an error sending the email. Try again later!",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            context=context,
        )


class InternalError(AppError):
    def __init__(
        self,
        code: str = "internal_error",
        message: str = "Something went very wrong!",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            context=context,
            operational=False,
        )
