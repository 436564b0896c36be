# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, request

from tourbook.application.use_cases.resources.crud import ResourceService
from tourbook.application.use_cases.users.profile import (
    DeactivateUserUseCase,
    UpdateProfileUseCase,
)
from tourbook.domain.users.entities import Role
from tourbook.infrastructure.audit import AuditAction, audit_log
from tourbook.interfaces.http.auth import AuthGuard, current_user
from tourbook.interfaces.http.dto import changes, parse_body
from tourbook.interfaces.http.dto.auth import UpdateMeRequestDTO
from tourbook.interfaces.http.dto.users import UserAdminUpdateDTO
from tourbook.interfaces.http.responses import listing, no_content, success


class UsersController:
    def __init__(
        self,
        *,
        guard: AuthGuard,
        users: ResourceService,
        update_profile: UpdateProfileUseCase,
        deactivate: DeactivateUserUseCase,
    ) -> None:
        self._guard = guard
        self._users = users
        self._update_profile = update_profile
        self._deactivate = deactivate

    def me(self) -> tuple[Response, int]:
        return success(self._users.get(current_user().id))

    def update_me(self) -> tuple[Response, int]:
        dto = parse_body(UpdateMeRequestDTO)
        user = self._update_profile.execute(current_user(), changes(dto))
        audit_log(AuditAction.ACCOUNT_UPDATED, user_id=user.id)
        return success(user.public_dict())

    def delete_me(self) -> tuple[Response, int]:
        user = current_user()
        self._deactivate.execute(user)
        audit_log(AuditAction.ACCOUNT_DEACTIVATED, user_id=user.id)
        return no_content()

    def list_users(self) -> tuple[Response, int]:
        return listing(self._users.list(request.args.to_dict(flat=False)))

    def get_user(self, user_id: int) -> tuple[Response, int]:
        return success(self._users.get(user_id))

    def update_user(self, user_id: int) -> tuple[Response, int]:
        dto = parse_body(UserAdminUpdateDTO)
        return success(self._users.update(user_id, changes(dto)))

    def delete_user(self, user_id: int) -> tuple[Response, int]:
        self._users.delete(user_id)
        return no_content()

    def as_blueprint(self) -> Blueprint:
        protect = self._guard.require()
        admin = self._guard.require(Role.ADMIN)

        bp = Blueprint("users", __name__, url_prefix="/api/v1/users")
        bp.add_url_rule("/me", view_func=protect(self.me), methods=["GET"])
        bp.add_url_rule("/update-me", view_func=protect(self.update_me), methods=["PATCH"])
        bp.add_url_rule("/delete-me", view_func=protect(self.delete_me), methods=["DELETE"])
        bp.add_url_rule("", view_func=admin(self.list_users), methods=["GET"])
        bp.add_url_rule("/<int:user_id>", view_func=admin(self.get_user), methods=["GET"])
        bp.add_url_rule(
            "/<int:user_id>", view_func=admin(self.update_user), methods=["PATCH"]
        )
        bp.add_url_rule(
            "/<int:user_id>", view_func=admin(self.delete_user), methods=["DELETE"]
        )
        return bp
