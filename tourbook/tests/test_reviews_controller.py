from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from tourbook.domain.users.entities import Role, User
from tourbook.tests.factories import bearer, create_tour, create_user


@pytest.fixture()
def tour() -> dict:
    return create_tour()


@pytest.fixture()
def reviewers() -> tuple[User, User]:
    return (
        create_user(name="Sophie Louise", email="sophie@tourbook.io"),
        create_user(name="Max Smith", email="max@tourbook.io"),
    )


@pytest.fixture()
def admin(container) -> dict[str, str]:
    user = create_user(name="Admin", email="admin@tourbook.io", role=Role.ADMIN)
    return bearer(container, user.id)


def _review(client: FlaskClient, container, user: User, tour_id: int, rating: float):
    return client.post(
        f"/api/v1/tours/{tour_id}/reviews",
        json={"review": "Amazing tour, would book again!", "rating": rating},
        headers=bearer(container, user.id),
    )


def _tour(client: FlaskClient, tour_id: int) -> dict:
    return client.get(f"/api/v1/tours/{tour_id}").get_json()["data"]["data"]


def test_nested_review_updates_tour_ratings(
    client: FlaskClient, container, tour: dict, reviewers: tuple[User, User]
) -> None:
    sophie, max_ = reviewers

    first = _review(client, container, sophie, tour["id"], 5)
    assert first.status_code == 201
    review = first.get_json()["data"]["data"]
    assert review["tour_id"] == tour["id"]
    assert review["user_id"] == sophie.id

    assert _review(client, container, max_, tour["id"], 4).status_code == 201

    data = _tour(client, tour["id"])
    assert data["ratings_quantity"] == 2
    assert data["ratings_average"] == 4.5
    assert [entry["user"]["name"] for entry in data["reviews"]] == ["Sophie Louise", "Max Smith"]
    assert set(data["reviews"][0]["user"]) == {"id", "name", "photo"}


def test_one_review_per_user_and_tour(
    client: FlaskClient, container, tour: dict, reviewers: tuple[User, User]
) -> None:
    sophie, _ = reviewers
    _review(client, container, sophie, tour["id"], 5)

    duplicate = _review(client, container, sophie, tour["id"], 3)

    assert duplicate.status_code == 400
    assert duplicate.get_json()["error"] == "duplicate_field"
    assert _tour(client, tour["id"])["ratings_quantity"] == 1


def test_review_for_missing_tour(
    client: FlaskClient, container, reviewers: tuple[User, User]
) -> None:
    response = _review(client, container, reviewers[0], 999, 5)

    assert response.status_code == 404
    assert response.get_json()["error"] == "tour_not_found"


def test_only_users_may_review(client: FlaskClient, tour: dict, admin: dict[str, str]) -> None:
    response = client.post(
        f"/api/v1/tours/{tour['id']}/reviews",
        json={"review": "Reviewing my own tour", "rating": 5},
        headers=admin,
    )

    assert response.status_code == 403


def test_review_validation(
    client: FlaskClient, container, tour: dict, reviewers: tuple[User, User]
) -> None:
    response = _review(client, container, reviewers[0], tour["id"], 6)
    assert response.status_code == 422

    missing_tour = client.post(
        "/api/v1/reviews",
        json={"review": "Lovely trip overall", "rating": 4},
        headers=bearer(container, reviewers[0].id),
    )
    assert missing_tour.status_code == 400
    assert missing_tour.get_json()["error"] == "missing_tour"


def test_nested_listing_is_scoped_to_tour(
    client: FlaskClient, container, tour: dict, reviewers: tuple[User, User]
) -> None:
    other = create_tour(name="The Sea Explorer")
    sophie, max_ = reviewers
    _review(client, container, sophie, tour["id"], 5)
    _review(client, container, max_, other["id"], 3)
    headers = bearer(container, sophie.id)

    assert client.get(f"/api/v1/tours/{tour['id']}/reviews").status_code == 401

    nested = client.get(f"/api/v1/tours/{tour['id']}/reviews", headers=headers)
    assert nested.get_json()["results"] == 1
    assert nested.get_json()["data"]["data"][0]["user_id"] == sophie.id

    everything = client.get("/api/v1/reviews", headers=headers)
    assert everything.get_json()["results"] == 2

    filtered = client.get("/api/v1/reviews?rating[lt]=4", headers=headers)
    assert [row["tour_id"] for row in filtered.get_json()["data"]["data"]] == [other["id"]]


def test_update_and_delete_recompute_ratings(
    client: FlaskClient,
    container,
    tour: dict,
    reviewers: tuple[User, User],
    admin: dict[str, str],
) -> None:
    sophie, max_ = reviewers
    first = _review(client, container, sophie, tour["id"], 5).get_json()["data"]["data"]
    _review(client, container, max_, tour["id"], 4)

    updated = client.patch(
        f"/api/v1/reviews/{first['id']}",
        json={"rating": 3},
        headers=bearer(container, sophie.id),
    )
    assert updated.status_code == 200
    assert _tour(client, tour["id"])["ratings_average"] == 3.5

    deleted = client.delete(f"/api/v1/reviews/{first['id']}", headers=admin)
    assert deleted.status_code == 204
    data = _tour(client, tour["id"])
    assert data["ratings_quantity"] == 1
    assert data["ratings_average"] == 4.0

    assert client.get(f"/api/v1/reviews/{first['id']}", headers=admin).status_code == 404


def test_last_review_removal_restores_default_rating(
    client: FlaskClient, container, tour: dict, reviewers: tuple[User, User], admin
) -> None:
    review = _review(client, container, reviewers[0], tour["id"], 2).get_json()["data"]["data"]
    assert _tour(client, tour["id"])["ratings_average"] == 2.0

    client.delete(f"/api/v1/reviews/{review['id']}", headers=admin)

    data = _tour(client, tour["id"])
    assert data["ratings_quantity"] == 0
    assert data["ratings_average"] == 4.5


def test_deleting_a_user_recomputes_reviewed_tours(
    client: FlaskClient, container, tour: dict, reviewers: tuple[User, User], admin
) -> None:
    sophie, max_ = reviewers
    other = create_tour(name="The Sea Explorer")
    _review(client, container, sophie, tour["id"], 2)
    _review(client, container, max_, tour["id"], 4)
    _review(client, container, sophie, other["id"], 3)

    response = client.delete(f"/api/v1/users/{sophie.id}", headers=admin)

    assert response.status_code == 204
    data = _tour(client, tour["id"])
    assert len(data["reviews"]) == 1
    assert data["ratings_quantity"] == 1
    assert data["ratings_average"] == 4.0
    emptied = _tour(client, other["id"])
    assert emptied["reviews"] == []
    assert emptied["ratings_quantity"] == 0
    assert emptied["ratings_average"] == 4.5


def test_bookings(client: FlaskClient, container, tour: dict, reviewers: tuple[User, User]) -> None:
    sophie, max_ = reviewers
    lead = create_user(name="Leo Gilbert", email="leo@tourbook.io", role=Role.LEAD_GUIDE)
    staff = bearer(container, lead.id)

    forbidden = client.post(
        "/api/v1/bookings",
        json={"tour_id": tour["id"], "user_id": sophie.id, "price": 397},
        headers=bearer(container, sophie.id),
    )
    assert forbidden.status_code == 403

    created = client.post(
        "/api/v1/bookings",
        json={"tour_id": tour["id"], "user_id": sophie.id, "price": 397},
        headers=staff,
    )
    assert created.status_code == 201
    booking = created.get_json()["data"]["data"]
    assert booking["paid"] is True
    assert booking["tour"] == {"id": tour["id"], "name": "The Forest Hiker"}
    assert booking["user"]["email"] == "sophie@tourbook.io"

    client.post(
        "/api/v1/bookings",
        json={"tour_id": tour["id"], "user_id": max_.id, "price": 397, "paid": False},
        headers=staff,
    )

    mine = client.get("/api/v1/bookings/my-bookings", headers=bearer(container, sophie.id))
    assert mine.get_json()["results"] == 1
    assert mine.get_json()["data"]["data"][0]["id"] == booking["id"]

    unpaid = client.get("/api/v1/bookings?paid=false", headers=staff)
    assert [row["user_id"] for row in unpaid.get_json()["data"]["data"]] == [max_.id]

    paid = client.patch(f"/api/v1/bookings/{booking['id']}", json={"paid": False}, headers=staff)
    assert paid.get_json()["data"]["data"]["paid"] is False

    assert client.delete(f"/api/v1/bookings/{booking['id']}", headers=staff).status_code == 204
    assert client.get(f"/api/v1/bookings/{booking['id']}", headers=staff).status_code == 404
