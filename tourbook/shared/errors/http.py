# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Response, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from tourbook.shared.config import load_config
from tourbook.shared.logging import logger

from .base import AppError, InternalError, NotFoundError, ValidationError


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def handle_app_error(error: AppError, *, verbose: bool = False) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict(verbose=verbose))
    return response, error.status


def register_error_handler(
    app, *, default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
) -> None:
    config = load_config()
    verbose = not config.is_production()

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.operational:
            logger.warning(
                f"Handled application error {exc.code} on {request.method} {request.path}"
            )
            return handle_app_error(exc, verbose=verbose)
        logger.error(f"Non-operational error {exc.code} on {request.method} {request.path}")
        if verbose:
            return handle_app_error(exc, verbose=True)
        return handle_app_error(InternalError())

    @app.errorhandler(IntegrityError)
    def _handle_integrity(exc: IntegrityError):
        logger.warning(f"Integrity error on {request.method} {request.path}: {exc.orig}")
        error = ValidationError(
            "duplicate_field",
            "Duplicate field value. Please use another value!",
            context={"detail": str(exc.orig)},
        )
        return handle_app_error(error, verbose=verbose)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if exc.code == HTTPStatus.NOT_FOUND:
            error = NotFoundError(
                "route_not_found", f"Can't find {request.path} on this server!"
            )
            return handle_app_error(error)
        payload = {
            "status": "fail" if (exc.code or 500) < 500 else "error",
            "error": (exc.name or "http_error").lower().replace(" ", "_"),
            "message": exc.description,
        }
        return jsonify(payload), exc.code or default_status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        from flask import g

        user = getattr(g, "user", None)
        user_id = getattr(user, "id", None)

        if verbose:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {_client_ip()}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
            payload = InternalError().to_dict()
            payload["message"] = str(exc) or payload["message"]
            payload["exception"] = repr(exc)
            return jsonify(payload), default_status

        logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")
        return jsonify(InternalError().to_dict()), default_status
