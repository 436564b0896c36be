from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "development"
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ["EMAIL_BACKEND"] = "log"
os.environ["JWT_SECRET"] = "test-jwt-secret"

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from tourbook.infrastructure.db import ENGINE, Base, init_db  # noqa: E402
from tourbook.tests.factories import RecordingNotifier  # noqa: E402


@pytest.fixture(autouse=True)
def database():
    init_db()
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def container(notifier: RecordingNotifier):
    from tourbook.infrastructure.container import Container

    built = Container()
    built.notifier = notifier
    return built


@pytest.fixture()
def app(container) -> Flask:
    from tourbook.app import create_app

    return create_app(container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
