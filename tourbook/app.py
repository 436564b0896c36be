# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from tourbook.infrastructure.container import Container, container as default_container
from tourbook.infrastructure.db import init_db
from tourbook.shared.config import load_config
from tourbook.shared.errors import register_error_handler
from tourbook.shared.logging import logger, setup_logging
from tourbook.shared.middleware.rate_limit import configure_rate_limit
from tourbook.shared.middleware.request_logger import configure_request_logging

_config = load_config()


def _add_security_headers(resp):
    resp.headers.setdefault("X-Frame-Options", "DENY")
    resp.headers.setdefault("Referrer-Policy", "no-referrer")
    resp.headers.setdefault("X-Content-Type-Options", "nosniff")
    resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
    resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

    if _config.security.enable_hsts:
        resp.headers.setdefault(
            "Strict-Transport-Security",
            "max-age=31536000; includeSubDomains; preload",
        )
    return resp


def create_app(container: Container | None = None) -> Flask:
    container = container or default_container
    init_db()
    setup_logging(debug_mode=_config.debug_logging)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=_config.secret_key)
    register_error_handler(app)
    configure_request_logging(app)
    configure_rate_limit(app, prefix="/api")

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": _config.security.allowed_origins}}
    }
    if any(origin != "*" for origin in _config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    for controller in container.controllers():
        app.register_blueprint(controller.as_blueprint())

    app.after_request(_add_security_headers)

    logger.info(f"Flask app initialized env={_config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=not _config.is_production())
