# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, g, jsonify

from tourbook.infrastructure.health import health_report
from tourbook.interfaces.http.auth import AuthGuard


class MiscController:
    def __init__(self, *, guard: AuthGuard) -> None:
        self._guard = guard

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule(
            "/api/v1/session", view_func=self._guard.optional(self.session), methods=["GET"]
        )
        return bp

    def health(self):
        report = health_report()
        status = HTTPStatus.OK if report["ok"] else HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify(report), status

    def session(self):
        user = g.user
        return jsonify(
            {
                "status": "success",
                "data": {
                    "authenticated": user is not None,
                    "user": user.public_dict() if user is not None else None,
                },
            }
        )
