# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping
from typing import Any

from flask import Flask, Response, g, request

from tourbook.shared.config import load_config
from tourbook.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_SECONDS = 1.0

_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-csrf-token"})
_SENSITIVE_PARAMS = ("password", "token", "secret")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def _safe_query(params: Mapping[str, Any]) -> dict[str, Any]:
    # query strings carry filters like price[lt]; only credential-looking keys are hidden
    return {
        key: "<redacted>" if any(word in key.lower() for word in _SENSITIVE_PARAMS) else value
        for key, value in params.items()
    }


def _route() -> str:
    return request.endpoint or "-"


def configure_request_logging(app: Flask) -> None:
    debug_mode = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        set_correlation_id(request.headers.get(REQUEST_ID_HEADER) or secrets.token_urlsafe(8))
        g.request_started = time.perf_counter()
        if debug_mode:
            logger.info(
                f"--> {request.method} {request.full_path.rstrip('?')} route={_route()} "
                f"ip={_client_ip()} query={_safe_query(request.args.to_dict())} "
                f"headers={_safe_headers(dict(request.headers))}"
            )
        else:
            logger.info(f"--> {request.method} {request.path} ip={_client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed = time.perf_counter() - getattr(g, "request_started", time.perf_counter())
        response.headers.setdefault(REQUEST_ID_HEADER, get_correlation_id())
        message = (
            f"<-- {request.method} {request.path} status={response.status_code} "
            f"route={_route()} duration={elapsed:.3f}s size={response.calculate_content_length()}"
        )
        if elapsed >= SLOW_REQUEST_SECONDS:
            logger.warning(f"slow request: {message}")
        else:
            logger.info(message)
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request failed: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
