# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request

from tourbook.application.use_cases.resources.crud import ResourceService
from tourbook.domain.query import where
from tourbook.domain.users.entities import Role
from tourbook.interfaces.http.auth import AuthGuard, current_user
from tourbook.interfaces.http.dto import changes, parse_body
from tourbook.interfaces.http.dto.bookings import BookingCreateDTO, BookingUpdateDTO
from tourbook.interfaces.http.responses import listing, no_content, success


class BookingsController:
    def __init__(self, *, guard: AuthGuard, bookings: ResourceService) -> None:
        self._guard = guard
        self._bookings = bookings

    def my_bookings(self) -> tuple[Response, int]:
        params = request.args.to_dict(flat=False)
        mine = (where("user_id", "eq", current_user().id),)
        return listing(self._bookings.list(params, base=mine))

    def list_bookings(self) -> tuple[Response, int]:
        return listing(self._bookings.list(request.args.to_dict(flat=False)))

    def get_booking(self, booking_id: int) -> tuple[Response, int]:
        return success(self._bookings.get(booking_id))

    def create_booking(self) -> tuple[Response, int]:
        dto = parse_body(BookingCreateDTO)
        return success(self._bookings.create(dto.model_dump()), status=HTTPStatus.CREATED)

    def update_booking(self, booking_id: int) -> tuple[Response, int]:
        dto = parse_body(BookingUpdateDTO)
        return success(self._bookings.update(booking_id, changes(dto)))

    def delete_booking(self, booking_id: int) -> tuple[Response, int]:
        self._bookings.delete(booking_id)
        return no_content()

    def as_blueprint(self) -> Blueprint:
        protect = self._guard.require()
        staff = self._guard.require(Role.ADMIN, Role.LEAD_GUIDE)

        bp = Blueprint("bookings", __name__, url_prefix="/api/v1/bookings")
        bp.add_url_rule("/my-bookings", view_func=protect(self.my_bookings), methods=["GET"])
        bp.add_url_rule("", view_func=staff(self.list_bookings), methods=["GET"])
        bp.add_url_rule("", view_func=staff(self.create_booking), methods=["POST"])
        bp.add_url_rule("/<int:booking_id>", view_func=staff(self.get_booking), methods=["GET"])
        bp.add_url_rule(
            "/<int:booking_id>", view_func=staff(self.update_booking), methods=["PATCH"]
        )
        bp.add_url_rule(
            "/<int:booking_id>", view_func=staff(self.delete_booking), methods=["DELETE"]
        )
        return bp
