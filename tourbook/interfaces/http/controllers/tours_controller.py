# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from tourbook.application.use_cases.resources.reviews import ReviewService
from tourbook.application.use_cases.resources.tours import TourService
from tourbook.domain.query import where
from tourbook.domain.users.entities import Role
from tourbook.interfaces.http.auth import AuthGuard, current_user
from tourbook.interfaces.http.dto import changes, parse_body
from tourbook.interfaces.http.dto.reviews import ReviewCreateDTO
from tourbook.interfaces.http.dto.tours import TourCreateDTO, TourUpdateDTO
from tourbook.interfaces.http.responses import listing, no_content, success


class ToursController:
    def __init__(self, *, guard: AuthGuard, tours: TourService, reviews: ReviewService) -> None:
        self._guard = guard
        self._tours = tours
        self._reviews = reviews

    def list_tours(self) -> tuple[Response, int]:
        return listing(self._tours.list(request.args.to_dict(flat=False)))

    def top_cheap(self) -> tuple[Response, int]:
        return listing(self._tours.top_cheap())

    def get_tour(self, tour_id: int) -> tuple[Response, int]:
        return success(self._tours.get(tour_id))

    def create_tour(self) -> tuple[Response, int]:
        dto = parse_body(TourCreateDTO)
        return success(self._tours.create(dto.model_dump(mode="json")), status=HTTPStatus.CREATED)

    def update_tour(self, tour_id: int) -> tuple[Response, int]:
        dto = parse_body(TourUpdateDTO)
        return success(self._tours.update(tour_id, changes(dto)))

    def delete_tour(self, tour_id: int) -> tuple[Response, int]:
        self._tours.delete(tour_id)
        return no_content()

    def tour_stats(self) -> tuple[Response, int]:
        return jsonify({"status": "success", "data": {"stats": self._tours.stats()}}), HTTPStatus.OK

    def monthly_plan(self, year: int) -> tuple[Response, int]:
        plan = self._tours.monthly_plan(year)
        return jsonify({"status": "success", "data": {"plan": plan}}), HTTPStatus.OK

    def tours_within(self, distance: str, latlng: str, unit: str) -> tuple[Response, int]:
        return listing(self._tours.within(distance, latlng, unit))

    def distances(self, latlng: str, unit: str) -> tuple[Response, int]:
        return listing(self._tours.distances(latlng, unit))

    def list_tour_reviews(self, tour_id: int) -> tuple[Response, int]:
        params = request.args.to_dict(flat=False)
        return listing(self._reviews.list(params, base=(where("tour_id", "eq", tour_id),)))

    def create_tour_review(self, tour_id: int) -> tuple[Response, int]:
        dto = parse_body(ReviewCreateDTO)
        data = changes(dto)
        data["tour_id"] = tour_id
        data.setdefault("user_id", current_user().id)
        return success(self._reviews.create(data), status=HTTPStatus.CREATED)

    def as_blueprint(self) -> Blueprint:
        protect = self._guard.require()
        staff = self._guard.require(Role.ADMIN, Role.LEAD_GUIDE)
        planners = self._guard.require(Role.ADMIN, Role.LEAD_GUIDE, Role.GUIDE)
        reviewer = self._guard.require(Role.USER)

        bp = Blueprint("tours", __name__, url_prefix="/api/v1/tours")
        bp.add_url_rule("", view_func=self.list_tours, methods=["GET"])
        bp.add_url_rule("", view_func=staff(self.create_tour), methods=["POST"])
        bp.add_url_rule("/top-5-cheap", view_func=self.top_cheap, methods=["GET"])
        bp.add_url_rule("/tour-stats", view_func=self.tour_stats, methods=["GET"])
        bp.add_url_rule(
            "/monthly-plan/<int:year>", view_func=planners(self.monthly_plan), methods=["GET"]
        )
        bp.add_url_rule(
            "/tours-within/<distance>/center/<latlng>/unit/<unit>",
            view_func=self.tours_within,
            methods=["GET"],
        )
        bp.add_url_rule(
            "/distances/<latlng>/unit/<unit>", view_func=self.distances, methods=["GET"]
        )
        bp.add_url_rule("/<int:tour_id>", view_func=self.get_tour, methods=["GET"])
        bp.add_url_rule("/<int:tour_id>", view_func=staff(self.update_tour), methods=["PATCH"])
        bp.add_url_rule("/<int:tour_id>", view_func=staff(self.delete_tour), methods=["DELETE"])
        bp.add_url_rule(
            "/<int:tour_id>/reviews", view_func=protect(self.list_tour_reviews), methods=["GET"]
        )
        bp.add_url_rule(
            "/<int:tour_id>/reviews",
            view_func=reviewer(self.create_tour_review),
            methods=["POST"],
        )
        return bp
