# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from http import HTTPStatus
from typing import Any

from flask import Response, jsonify

from tourbook.application.services.tokens import IssuedToken
from tourbook.domain.users.entities import User
from tourbook.interfaces.http.auth import JWT_COOKIE, LOGGED_OUT
from tourbook.shared.config import load_config


def success(data: Any, *, status: HTTPStatus = HTTPStatus.OK) -> tuple[Response, HTTPStatus]:
    return jsonify({"status": "success", "data": {"data": data}}), status


def listing(items: Sequence[Any], **extra: Any) -> tuple[Response, HTTPStatus]:
    payload = {"status": "success", "results": len(items), "data": {"data": list(items), **extra}}
    return jsonify(payload), HTTPStatus.OK


def no_content() -> tuple[Response, HTTPStatus]:
    return Response(status=HTTPStatus.NO_CONTENT), HTTPStatus.NO_CONTENT


def token_response(
    user: User, issued: IssuedToken, *, status: HTTPStatus = HTTPStatus.OK
) -> tuple[Response, HTTPStatus]:
    config = load_config()
    response = jsonify(
        {"status": "success", "token": issued.token, "data": {"user": user.public_dict()}}
    )
    response.set_cookie(
        JWT_COOKIE,
        issued.token,
        expires=datetime.now(UTC) + timedelta(days=config.jwt.cookie_expires_in_days),
        httponly=True,
        secure=config.is_production(),
        samesite=config.security.cookie_samesite,
    )
    return response, status


def logged_out_response() -> tuple[Response, HTTPStatus]:
    config = load_config()
    response = jsonify({"status": "success"})
    response.set_cookie(
        JWT_COOKIE,
        LOGGED_OUT,
        expires=datetime.now(UTC) + timedelta(seconds=10),
        httponly=True,
        secure=config.is_production(),
        samesite=config.security.cookie_samesite,
    )
    return response, HTTPStatus.OK
