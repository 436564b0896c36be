# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, request

from tourbook.application.use_cases.resources.reviews import ReviewService
from tourbook.domain.users.entities import Role
from tourbook.interfaces.http.auth import AuthGuard, current_user
from tourbook.interfaces.http.dto import changes, parse_body
from tourbook.interfaces.http.dto.reviews import ReviewCreateDTO, ReviewUpdateDTO
from tourbook.interfaces.http.responses import listing, no_content, success
from tourbook.shared.errors.base import ValidationError


class ReviewsController:
    def __init__(self, *, guard: AuthGuard, reviews: ReviewService) -> None:
        self._guard = guard
        self._reviews = reviews

    def list_reviews(self) -> tuple[Response, int]:
        return listing(self._reviews.list(request.args.to_dict(flat=False)))

    def get_review(self, review_id: int) -> tuple[Response, int]:
        return success(self._reviews.get(review_id))

    def create_review(self) -> tuple[Response, int]:
        data = changes(parse_body(ReviewCreateDTO))
        if "tour_id" not in data:
            raise ValidationError(
                "missing_tour", "Review must belong to a tour.", context={"fields": ["tour_id"]}
            )
        data.setdefault("user_id", current_user().id)
        return success(self._reviews.create(data), status=HTTPStatus.CREATED)

    def update_review(self, review_id: int) -> tuple[Response, int]:
        dto = parse_body(ReviewUpdateDTO)
        return success(self._reviews.update(review_id, changes(dto)))

    def delete_review(self, review_id: int) -> tuple[Response, int]:
        self._reviews.delete(review_id)
        return no_content()

    def as_blueprint(self) -> Blueprint:
        protect = self._guard.require()
        author = self._guard.require(Role.USER)
        editor = self._guard.require(Role.USER, Role.ADMIN)

        bp = Blueprint("reviews", __name__, url_prefix="/api/v1/reviews")
        bp.add_url_rule("", view_func=protect(self.list_reviews), methods=["GET"])
        bp.add_url_rule("", view_func=author(self.create_review), methods=["POST"])
        bp.add_url_rule("/<int:review_id>", view_func=protect(self.get_review), methods=["GET"])
        bp.add_url_rule(
            "/<int:review_id>", view_func=editor(self.update_review), methods=["PATCH"]
        )
        bp.add_url_rule(
            "/<int:review_id>", view_func=editor(self.delete_review), methods=["DELETE"]
        )
        return bp
