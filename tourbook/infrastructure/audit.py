# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Structured audit trail for authentication events, written to the log."""

from __future__ import annotations

from enum import Enum
from typing import Any

from tourbook.shared.logging import logger

_SENSITIVE_KEYS = ("password", "token", "secret", "key")


class AuditAction(str, Enum):
    SIGNUP = "signup"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET = "password_reset"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DEACTIVATED = "account_deactivated"


def _sanitize_details(details: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "***REDACTED***" if any(s in key.lower() for s in _SENSITIVE_KEYS) else value
        for key, value in details.items()
    }


def audit_log(
    action: AuditAction,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    message = f"AUDIT: {action.value} | user_id={user_id} | ip={ip_address} | success={success}"
    safe_details = _sanitize_details(details) if details else {}
    if safe_details:
        message += f" | details={safe_details}"

    if success:
        logger.info(message)
    else:
        logger.warning(message)


__all__ = ["AuditAction", "audit_log"]
