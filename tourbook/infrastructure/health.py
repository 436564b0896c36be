# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from tourbook.infrastructure.db import ENGINE, session_scope
from tourbook.infrastructure.db.models import Booking, Review, Tour, User
from tourbook.shared.logging import logger

_COUNTED = {"tours": Tour, "reviews": Review, "users": User, "bookings": Booking}


def check_database() -> bool:
    with ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))
    return True


def health_report() -> dict[str, Any]:
    """Liveness of the store plus row counts per resource."""
    try:
        check_database()
        with session_scope() as session:
            counts = {
                name: int(session.scalar(select(func.count()).select_from(model)) or 0)
                for name, model in _COUNTED.items()
            }
    except SQLAlchemyError as exc:
        logger.error(f"health: database check failed: {exc}")
        return {"ok": False, "database": "unavailable"}
    return {"ok": True, "database": "ok", "resources": counts}


__all__ = ["check_database", "health_report"]
