# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"


def _rule(pattern: str, replacement: str, flags: int = 0) -> tuple[re.Pattern[str], str]:
    return re.compile(pattern, flags), replacement


_RULES: list[tuple[re.Pattern[str], str]] = [
    # Application secrets
    _rule(r"(secret[_-]?key\s*[:=]\s*['\"]?)([\w\-]{16,})", rf"\1{_REDACTED}"),
    _rule(r"(jwt[_-]?secret\s*[:=]\s*['\"]?)([^'\"\s]{8,})", rf"\1{_REDACTED}", re.I),
    # Session tokens: bearer header, jwt cookie, bare JWTs
    _rule(r"(bearer\s+)([\w\-.]{20,})", rf"\1{_REDACTED}", re.I),
    _rule(r"(jwt=)([^;\s]{10,})", rf"\1{_REDACTED}"),
    _rule(r"eyJ[\w\-]{10,}\.[\w\-]{10,}\.[\w\-]{10,}", "***JWT***"),
    _rule(r"(token\s*[:=]\s*['\"]?)([\w\-.]{20,})", rf"\1{_REDACTED}"),
    # Reset links carry the plaintext reset token
    _rule(r"(reset-password/)([a-fA-F0-9]{32,})", rf"\1{_REDACTED}"),
    # password=, password_current=, password_confirm=
    _rule(
        r"(password(?:_current|_confirm)?\s*[:=]\s*['\"]?)([^'\"\s,}]{6,})",
        rf"\1{_REDACTED}",
        re.I,
    ),
    # Credentials inside database URLs
    _rule(r"(\w+(?:\+\w+)?://[^:/\s]+:)([^@\s]+)(@)", rf"\1{_REDACTED}\3"),
    # Email addresses keep only their domain
    _rule(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,})", r"***@\1"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """loguru filter: scrub the message in place and always let the record through."""
    record["message"] = sanitize_message(record["message"])
    return True
