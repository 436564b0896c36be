# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Generic CRUD repositories over the mapped resources.

Rows leave this module as plain dicts already shaped by the request's
projection, so the HTTP layer never touches ORM instances.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any

from sqlalchemy import func, inspect, select, update
from sqlalchemy.orm import Session

from tourbook.domain.query import FilterTerm, Projection, QuerySpec
from tourbook.domain.query.spec import DEFAULT_PROJECTION
from tourbook.domain.tours.geo import (
    DistanceUnit,
    GeoPoint,
    distance_in_unit,
    within_sphere,
)
from tourbook.domain.tours.ratings import RatingSummary
from tourbook.infrastructure.db.models import Booking, Review, Tour, User
from tourbook.infrastructure.db.session import session_scope
from tourbook.infrastructure.query import build_select, conditions, row_to_dict
from tourbook.shared.errors.base import ValidationError
from tourbook.shared.logging import logger

_READ_ONLY = frozenset({"id", "version", "created_at"})


class SqlAlchemyResourceRepository:
    hidden: tuple[str, ...] = ()
    computed: tuple[str, ...] = ()

    def __init__(self, model: type) -> None:
        self._model = model
        self._writable = frozenset(
            attr.key for attr in inspect(model).column_attrs
        ) - _READ_ONLY - frozenset(self.hidden)

    @property
    def name(self) -> str:
        return self._model.__tablename__

    def _guard(self, spec: QuerySpec) -> None:
        touched = [term.field for term in spec.filters] + [key.field for key in spec.sort]
        for name in touched:
            if name in self.hidden:
                raise ValidationError(
                    "unknown_field", f"Invalid field: {name}.", context={"field": name}
                )

    def _serialize(
        self, session: Session, rows: Sequence[Any], projection: Projection
    ) -> list[dict[str, Any]]:
        return [
            row_to_dict(row, projection, hidden=self.hidden, computed=self.computed)
            for row in rows
        ]

    def _assign(self, row: Any, data: Mapping[str, Any]) -> None:
        for key, value in data.items():
            if key in self._writable:
                setattr(row, key, value)

    def list(self, spec: QuerySpec) -> list[dict[str, Any]]:
        self._guard(spec)
        with session_scope() as session:
            rows = session.scalars(build_select(self._model, spec)).all()
            return self._serialize(session, rows, spec.projection)

    def _find(self, session: Session, resource_id: int, base: Iterable[FilterTerm]) -> Any:
        stmt = select(self._model).where(
            self._model.id == resource_id, *conditions(self._model, tuple(base))
        )
        return session.scalars(stmt).first()

    def get(
        self,
        resource_id: int,
        *,
        base: Iterable[FilterTerm] = (),
        projection: Projection = DEFAULT_PROJECTION,
    ) -> dict[str, Any] | None:
        with session_scope() as session:
            row = self._find(session, resource_id, base)
            if row is None:
                return None
            return self._serialize(session, [row], projection)[0]

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        with session_scope() as session:
            row = self._model()
            self._assign(row, data)
            session.add(row)
            session.flush()
            session.refresh(row)
            logger.info(f"{self.name}.create: id={row.id}")
            return self._serialize(session, [row], DEFAULT_PROJECTION)[0]

    def update(
        self,
        resource_id: int,
        data: Mapping[str, Any],
        *,
        base: Iterable[FilterTerm] = (),
    ) -> dict[str, Any] | None:
        with session_scope() as session:
            row = self._find(session, resource_id, base)
            if row is None:
                return None
            self._assign(row, data)
            row.version = (row.version or 0) + 1
            session.flush()
            logger.info(f"{self.name}.update: id={row.id} fields={sorted(data)}")
            return self._serialize(session, [row], DEFAULT_PROJECTION)[0]

    def delete(
        self, resource_id: int, *, base: Iterable[FilterTerm] = ()
    ) -> dict[str, Any] | None:
        with session_scope() as session:
            row = self._find(session, resource_id, base)
            if row is None:
                return None
            payload = row_to_dict(row, hidden=self.hidden, computed=self.computed)
            session.delete(row)
            logger.info(f"{self.name}.delete: id={resource_id}")
            return payload


def _user_summaries(session: Session, ids: Collection[int]) -> dict[int, dict[str, Any]]:
    if not ids:
        return {}
    rows = session.scalars(select(User).where(User.id.in_(ids))).all()
    return {
        row.id: {
            "id": row.id,
            "name": row.name,
            "email": row.email,
            "photo": row.photo,
            "role": row.role,
        }
        for row in rows
    }


def _parse_start_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


class TourRepository(SqlAlchemyResourceRepository):
    computed = ("duration_weeks",)

    def __init__(self) -> None:
        super().__init__(Tour)

    def _serialize(
        self, session: Session, rows: Sequence[Any], projection: Projection
    ) -> list[dict[str, Any]]:
        payloads = super()._serialize(session, rows, projection)
        if not projection.allows("guides"):
            return payloads
        guide_ids = {int(gid) for row in rows for gid in (row.guides or [])}
        guides = _user_summaries(session, guide_ids)
        for payload, row in zip(payloads, rows):
            payload["guides"] = [
                guides[int(gid)] for gid in (row.guides or []) if int(gid) in guides
            ]
        return payloads

    def get_with_reviews(
        self, tour_id: int, *, base: Iterable[FilterTerm] = ()
    ) -> dict[str, Any] | None:
        with session_scope() as session:
            row = self._find(session, tour_id, base)
            if row is None:
                return None
            payload = self._serialize(session, [row], DEFAULT_PROJECTION)[0]
            reviews = session.scalars(
                select(Review).where(Review.tour_id == tour_id).order_by(Review.id.asc())
            ).all()
            payload["reviews"] = ReviewRepository.populate(session, reviews, DEFAULT_PROJECTION)
            return payload

    def stats(self, *, min_rating: float = 4.5) -> list[dict[str, Any]]:
        avg_price = func.avg(Tour.price).label("avg_price")
        stmt = (
            select(
                func.upper(Tour.difficulty).label("difficulty"),
                func.count(Tour.id).label("num_tours"),
                func.sum(Tour.ratings_quantity).label("num_ratings"),
                func.avg(Tour.ratings_average).label("avg_rating"),
                avg_price,
                func.min(Tour.price).label("min_price"),
                func.max(Tour.price).label("max_price"),
            )
            .where(Tour.ratings_average >= min_rating)
            .group_by(func.upper(Tour.difficulty))
            .order_by(avg_price.asc())
        )
        with session_scope() as session:
            return [dict(row._mapping) for row in session.execute(stmt)]

    def monthly_plan(self, year: int) -> list[dict[str, Any]]:
        first, last = date(year, 1, 1), date(year, 12, 31)
        months: dict[int, list[str]] = defaultdict(list)
        with session_scope() as session:
            for name, start_dates in session.execute(select(Tour.name, Tour.start_dates)):
                for raw in start_dates or []:
                    start = _parse_start_date(raw)
                    if start is not None and first <= start <= last:
                        months[start.month].append(name)
        plan = [
            {"month": month, "num_tour_starts": len(names), "tours": names}
            for month, names in months.items()
        ]
        plan.sort(key=lambda entry: (-entry["num_tour_starts"], entry["month"]))
        return plan

    def within(
        self,
        center: GeoPoint,
        radius: float,
        *,
        base: Iterable[FilterTerm] = (),
    ) -> list[dict[str, Any]]:
        with session_scope() as session:
            rows = session.scalars(
                select(Tour).where(*conditions(Tour, tuple(base))).order_by(Tour.id.asc())
            ).all()
            matches = []
            for row in rows:
                point = GeoPoint.from_geojson(row.start_location)
                if point is not None and within_sphere(center, point, radius):
                    matches.append(row)
            return self._serialize(session, matches, DEFAULT_PROJECTION)

    def distances(self, origin: GeoPoint, unit: DistanceUnit) -> list[dict[str, Any]]:
        result = []
        with session_scope() as session:
            rows = session.execute(select(Tour.id, Tour.name, Tour.start_location)).all()
        for tour_id, name, start_location in rows:
            point = GeoPoint.from_geojson(start_location)
            if point is None:
                continue
            result.append(
                {"id": tour_id, "name": name, "distance": distance_in_unit(origin, point, unit)}
            )
        result.sort(key=lambda entry: entry["distance"])
        return result

    def apply_rating_summary(self, tour_id: int, summary: RatingSummary) -> bool:
        # single UPDATE, no read: the last recompute to commit wins
        stmt = (
            update(Tour)
            .where(Tour.id == tour_id)
            .values(
                ratings_quantity=summary.quantity,
                ratings_average=summary.average,
                version=Tour.version + 1,
            )
        )
        with session_scope() as session:
            return session.execute(stmt).rowcount > 0


class ReviewRepository(SqlAlchemyResourceRepository):
    def __init__(self) -> None:
        super().__init__(Review)

    @staticmethod
    def populate(
        session: Session, rows: Sequence[Any], projection: Projection
    ) -> list[dict[str, Any]]:
        payloads = [row_to_dict(row, projection) for row in rows]
        if not projection.allows("user_id"):
            return payloads
        users = _user_summaries(session, {row.user_id for row in rows})
        for payload, row in zip(payloads, rows):
            summary = users.get(row.user_id)
            if summary is not None:
                payload["user"] = {
                    "id": summary["id"],
                    "name": summary["name"],
                    "photo": summary["photo"],
                }
        return payloads

    def _serialize(
        self, session: Session, rows: Sequence[Any], projection: Projection
    ) -> list[dict[str, Any]]:
        return self.populate(session, rows, projection)

    def ratings_for_tour(self, tour_id: int) -> list[float]:
        with session_scope() as session:
            return [
                float(value)
                for value in session.scalars(select(Review.rating).where(Review.tour_id == tour_id))
            ]

    def tour_ids_for_user(self, user_id: int) -> list[int]:
        with session_scope() as session:
            stmt = select(Review.tour_id).where(Review.user_id == user_id).distinct()
            return sorted(session.scalars(stmt))


class BookingRepository(SqlAlchemyResourceRepository):
    def __init__(self) -> None:
        super().__init__(Booking)

    def _serialize(
        self, session: Session, rows: Sequence[Any], projection: Projection
    ) -> list[dict[str, Any]]:
        payloads = super()._serialize(session, rows, projection)
        tour_ids = {row.tour_id for row in rows}
        names = dict(
            session.execute(select(Tour.id, Tour.name).where(Tour.id.in_(tour_ids))).all()
        )
        users = _user_summaries(session, {row.user_id for row in rows})
        for payload, row in zip(payloads, rows):
            if projection.allows("tour_id") and row.tour_id in names:
                payload["tour"] = {"id": row.tour_id, "name": names[row.tour_id]}
            if projection.allows("user_id") and row.user_id in users:
                payload["user"] = users[row.user_id]
        return payloads


class UserResourceRepository(SqlAlchemyResourceRepository):
    hidden = ("password_hash", "password_reset_token", "password_reset_expires", "active")

    def __init__(self) -> None:
        super().__init__(User)


__all__ = [
    "BookingRepository",
    "ReviewRepository",
    "SqlAlchemyResourceRepository",
    "TourRepository",
    "UserResourceRepository",
]
