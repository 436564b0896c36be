from __future__ import annotations

from datetime import UTC, datetime, timedelta
from urllib.parse import urlparse

from flask.testing import FlaskClient

from tourbook.domain.users.entities import Role
from tourbook.tests.factories import RecordingNotifier, bearer, create_user

SIGNUP = {
    "name": "Natalie Bell",
    "email": "natalie@tourbook.io",
    "password": "pass1234",
    "password_confirm": "pass1234",
}
NEW_PASSWORD = {"password": "newpass99", "password_confirm": "newpass99"}


def _signup(client: FlaskClient, **overrides) -> dict:
    response = client.post("/api/v1/users/signup", json={**SIGNUP, **overrides})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_signup_issues_token_and_welcome_email(
    client: FlaskClient, notifier: RecordingNotifier
) -> None:
    payload = _signup(client)

    assert payload["status"] == "success"
    assert payload["token"]
    user = payload["data"]["user"]
    assert user["email"] == "natalie@tourbook.io"
    assert user["role"] == "user"
    assert "password_hash" not in user
    [(email, url, kind)] = notifier.sent
    assert (email, kind) == ("natalie@tourbook.io", "welcome")
    assert url.endswith("/api/v1/users/me")


def test_signup_validation(client: FlaskClient) -> None:
    mismatch = client.post(
        "/api/v1/users/signup", json={**SIGNUP, "password_confirm": "pass9999"}
    )
    assert mismatch.status_code == 400
    assert mismatch.get_json()["error"] == "password_mismatch"

    short = client.post(
        "/api/v1/users/signup", json={**SIGNUP, "password": "short", "password_confirm": "short"}
    )
    assert short.status_code == 422

    _signup(client)
    duplicate = client.post("/api/v1/users/signup", json=SIGNUP)
    assert duplicate.status_code == 400
    assert duplicate.get_json()["error"] == "duplicate_field"


def test_signup_ignores_requested_role(client: FlaskClient) -> None:
    payload = _signup(client, role="admin")

    assert payload["data"]["user"]["role"] == "user"


def test_login_and_me(client: FlaskClient) -> None:
    _signup(client)

    bad = client.post(
        "/api/v1/users/login", json={"email": "natalie@tourbook.io", "password": "wrongpass"}
    )
    assert bad.status_code == 401
    assert bad.get_json()["error"] == "invalid_credentials"

    login = client.post(
        "/api/v1/users/login", json={"email": "Natalie@Tourbook.io", "password": "pass1234"}
    )
    assert login.status_code == 200
    token = login.get_json()["token"]

    me = client.get("/api/v1/users/me", headers=_auth(token))
    assert me.status_code == 200
    data = me.get_json()["data"]["data"]
    assert data["email"] == "natalie@tourbook.io"
    assert "password_hash" not in data
    assert "password_reset_token" not in data


def test_cookie_authentication_and_logout(client: FlaskClient) -> None:
    _signup(client)

    assert client.get("/api/v1/users/me").status_code == 200

    client.get("/api/v1/users/logout")
    response = client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.get_json()["error"] == "token_missing"


def test_protected_route_without_token(client: FlaskClient) -> None:
    response = client.get("/api/v1/users/me")

    assert response.status_code == 401
    assert response.get_json()["status"] == "fail"


def test_session_reports_optional_identity(client: FlaskClient, container) -> None:
    anonymous = client.get("/api/v1/session", headers=_auth("garbage"))
    assert anonymous.get_json()["data"] == {"authenticated": False, "user": None}

    user = create_user()
    known = client.get("/api/v1/session", headers=bearer(container, user.id))
    assert known.get_json()["data"]["authenticated"] is True
    assert known.get_json()["data"]["user"]["id"] == user.id


def test_update_password_invalidates_older_tokens(client: FlaskClient, container) -> None:
    user = create_user()
    stale = bearer(container, user.id, now=datetime.now(UTC) - timedelta(minutes=5))

    wrong = client.patch(
        "/api/v1/users/update-my-password",
        headers=stale,
        json={**NEW_PASSWORD, "password_current": "nope1234"},
    )
    assert wrong.status_code == 401
    assert wrong.get_json()["error"] == "wrong_password"

    response = client.patch(
        "/api/v1/users/update-my-password",
        headers=stale,
        json={**NEW_PASSWORD, "password_current": "pass1234"},
    )
    assert response.status_code == 200
    fresh = response.get_json()["token"]

    rejected = client.get("/api/v1/users/me", headers=stale)
    assert rejected.status_code == 401
    assert rejected.get_json()["error"] == "password_changed"
    assert client.get("/api/v1/users/me", headers=_auth(fresh)).status_code == 200

    login = client.post(
        "/api/v1/users/login", json={"email": user.email, "password": "newpass99"}
    )
    assert login.status_code == 200


def test_forgot_and_reset_password(client: FlaskClient, notifier: RecordingNotifier) -> None:
    user = create_user()

    unknown = client.post("/api/v1/users/forgot-password", json={"email": "ghost@tourbook.io"})
    assert unknown.status_code == 404

    response = client.post("/api/v1/users/forgot-password", json={"email": user.email})
    assert response.status_code == 200
    assert response.get_json()["message"] == "Token sent to email!"

    reset_path = urlparse(notifier.last_url("password_reset")).path
    assert reset_path.startswith("/api/v1/users/reset-password/")

    reset = client.patch(
        reset_path, json={"password": "resetpass1", "password_confirm": "resetpass1"}
    )
    assert reset.status_code == 200
    assert reset.get_json()["token"]

    reused = client.patch(
        reset_path, json={"password": "resetpass2", "password_confirm": "resetpass2"}
    )
    assert reused.status_code == 401
    assert reused.get_json()["error"] == "reset_token_invalid"

    login = client.post(
        "/api/v1/users/login", json={"email": user.email, "password": "resetpass1"}
    )
    assert login.status_code == 200


def test_forgot_password_delivery_failure(
    client: FlaskClient, notifier: RecordingNotifier, container
) -> None:
    user = create_user()
    notifier.fail = True

    response = client.post("/api/v1/users/forgot-password", json={"email": user.email})

    assert response.status_code == 500
    assert response.get_json()["error"] == "reset_email_failed"
    stored = container.user_repository.find_by_id(user.id)
    assert stored.password_reset_token is None


def test_update_me_and_delete_me(client: FlaskClient, container) -> None:
    user = create_user()
    headers = bearer(container, user.id)

    rejected = client.patch(
        "/api/v1/users/update-me", headers=headers, json={"password": "sneaky123"}
    )
    assert rejected.status_code == 400
    assert rejected.get_json()["error"] == "password_update_not_allowed"

    updated = client.patch(
        "/api/v1/users/update-me", headers=headers, json={"name": "Laura W.", "role": "admin"}
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["data"]["name"] == "Laura W."
    assert updated.get_json()["data"]["data"]["role"] == "user"

    deleted = client.delete("/api/v1/users/delete-me", headers=headers)
    assert deleted.status_code == 204

    assert client.get("/api/v1/users/me", headers=headers).status_code == 401
    login = client.post(
        "/api/v1/users/login", json={"email": user.email, "password": "pass1234"}
    )
    assert login.status_code == 401


def test_admin_user_management(client: FlaskClient, container) -> None:
    admin = create_user(name="Admin", email="admin@tourbook.io", role=Role.ADMIN)
    member = create_user()
    gone = create_user(name="Gone", email="gone@tourbook.io")
    container.deactivate_user_use_case.execute(gone)

    forbidden = client.get("/api/v1/users", headers=bearer(container, member.id))
    assert forbidden.status_code == 403
    assert forbidden.get_json()["error"] == "role_not_allowed"

    headers = bearer(container, admin.id)
    listing = client.get("/api/v1/users?sort=name", headers=headers)
    assert listing.status_code == 200
    assert [row["email"] for row in listing.get_json()["data"]["data"]] == [
        "admin@tourbook.io",
        "laura@tourbook.io",
    ]
    assert client.get(f"/api/v1/users/{gone.id}", headers=headers).status_code == 404

    hidden_filter = client.get("/api/v1/users?password_hash=x", headers=headers)
    assert hidden_filter.status_code == 400
    assert hidden_filter.get_json()["error"] == "unknown_field"

    promoted = client.patch(
        f"/api/v1/users/{member.id}", headers=headers, json={"role": "guide"}
    )
    assert promoted.status_code == 200
    assert promoted.get_json()["data"]["data"]["role"] == "guide"

    invalid_role = client.patch(
        f"/api/v1/users/{member.id}", headers=headers, json={"role": "emperor"}
    )
    assert invalid_role.status_code == 422

    assert client.delete(f"/api/v1/users/{member.id}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/users/{member.id}", headers=headers).status_code == 404
