# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    DeliveryError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "DeliveryError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
