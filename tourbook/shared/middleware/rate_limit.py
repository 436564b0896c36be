# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client request throttling.

``configure_rate_limit`` applies the global ``RL_LIMIT``/``RL_WINDOW`` budget
to every ``/api`` request; ``rate_limit`` adds a tighter budget to a single
view such as login or forgot-password.
"""

from __future__ import annotations

import math
import time
from collections import defaultdict, deque
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from threading import Lock

from flask import Flask, Response, jsonify, request

from tourbook.shared.config import load_config
from tourbook.shared.logging import logger

_MESSAGE = "Too many requests from this IP, please try again in an hour."


class SlidingWindowLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def hit(self, key: str) -> float | None:
        """Record a request; returns seconds to wait when over budget, else None."""
        now = self._clock()
        with self._lock:
            hits = self._hits[key]
            while hits and now - hits[0] >= self._window:
                hits.popleft()
            if len(hits) >= self._limit:
                return self._window - (now - hits[0])
            hits.append(now)
            return None


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or request.remote_addr or "unknown"


def _too_many(retry_after: float) -> tuple[Response, HTTPStatus]:
    logger.warning(f"rate_limit: {request.method} {request.path} ip={_client_ip()} throttled")
    response = jsonify({"status": "fail", "error": "rate_limited", "message": _MESSAGE})
    response.headers["Retry-After"] = str(max(1, math.ceil(retry_after)))
    return response, HTTPStatus.TOO_MANY_REQUESTS


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    security = load_config().security
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not security.enable_rate_limit:
            return view

        @wraps(view)
        def wrapper(*args, **kwargs):
            retry_after = limiter.hit(f"{request.endpoint}:{_client_ip()}")
            if retry_after is not None:
                return _too_many(retry_after)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def configure_rate_limit(app: Flask, prefix: str = "/api") -> None:
    security = load_config().security
    if not security.enable_rate_limit:
        return
    limiter = SlidingWindowLimiter(security.rate_limit_requests, security.rate_limit_window)

    @app.before_request
    def _throttle_api():
        if not request.path.startswith(prefix):
            return None
        retry_after = limiter.hit(_client_ip())
        return _too_many(retry_after) if retry_after is not None else None


__all__ = ["SlidingWindowLimiter", "configure_rate_limit", "rate_limit"]
