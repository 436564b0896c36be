# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from tourbook.domain.users.entities import User as DomainUser
from tourbook.domain.users.exceptions import UserNoLongerExistsError
from tourbook.domain.users.repositories import UserRepository
from tourbook.infrastructure.db.models import User
from tourbook.infrastructure.db.session import session_scope

_PROFILE_FIELDS = frozenset({"name", "email", "photo"})


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        role=row.role,
        photo=row.photo,
        active=bool(row.active),
        password_changed_at=row.password_changed_at,
        password_reset_token=row.password_reset_token,
        password_reset_expires=row.password_reset_expires,
        created_at=row.created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_email(self, email: str) -> DomainUser | None:
        with session_scope() as session:
            row = (
                session.query(User)
                .filter(User.email == email.strip().lower(), User.active.is_(True))
                .first()
            )
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with session_scope() as session:
            row = session.query(User).filter(User.id == user_id, User.active.is_(True)).first()
            return _to_domain(row) if row else None

    def find_by_reset_token(self, hashed_token: str, now: datetime) -> DomainUser | None:
        with session_scope() as session:
            row = (
                session.query(User)
                .filter(
                    User.password_reset_token == hashed_token,
                    User.password_reset_expires > now,
                    User.active.is_(True),
                )
                .first()
            )
            return _to_domain(row) if row else None

    def email_taken(self, email: str) -> bool:
        with session_scope() as session:
            return (
                session.query(User.id).filter(User.email == email.strip().lower()).first()
                is not None
            )

    def add(self, user: DomainUser) -> DomainUser:
        with session_scope() as session:
            row = User(
                name=user.name,
                email=user.email.strip().lower(),
                password_hash=user.password_hash,
                role=user.role.value,
                photo=user.photo,
                active=user.active,
                created_at=user.created_at,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def save(self, user: DomainUser) -> DomainUser:
        with session_scope() as session:
            row = session.get(User, user.id)
            if row is None:
                raise UserNoLongerExistsError()
            row.password_hash = user.password_hash
            row.password_changed_at = user.password_changed_at
            row.password_reset_token = user.password_reset_token
            row.password_reset_expires = user.password_reset_expires
            row.version = (row.version or 0) + 1
            session.flush()
            return _to_domain(row)

    def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            if row is None or not row.active:
                return None
            for key, value in changes.items():
                if key not in _PROFILE_FIELDS:
                    continue
                if key == "email":
                    value = str(value).strip().lower()
                setattr(row, key, value)
            row.version = (row.version or 0) + 1
            session.flush()
            return _to_domain(row)

    def deactivate(self, user_id: int) -> None:
        with session_scope() as session:
            row = session.get(User, user_id)
            if row is not None:
                row.active = False
