from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from tourbook.application.services.password_hashing import WerkzeugPasswordHasher
from tourbook.application.services.tokens import JwtTokenService
from tourbook.domain.users.exceptions import TokenExpiredError, TokenInvalidError


@pytest.fixture()
def service() -> JwtTokenService:
    return JwtTokenService(secret="token-secret", ttl=timedelta(days=90))


def test_issue_and_decode(service: JwtTokenService) -> None:
    now = datetime.now(UTC).replace(microsecond=0) - timedelta(hours=1)

    issued = service.issue(42, now)
    claims = service.decode(issued.token)

    assert claims.user_id == 42
    assert claims.issued_at == int(now.timestamp())
    assert claims.expires_at == int((now + timedelta(days=90)).timestamp())
    assert issued.expires_at == claims.expires_at


def test_expired_token(service: JwtTokenService) -> None:
    issued = service.issue(1, datetime.now(UTC) - timedelta(days=91))

    with pytest.raises(TokenExpiredError):
        service.decode(issued.token)


def test_wrong_secret(service: JwtTokenService) -> None:
    other = JwtTokenService(secret="another-secret", ttl=timedelta(days=1))

    with pytest.raises(TokenInvalidError):
        service.decode(other.issue(1).token)


def test_garbage_token(service: JwtTokenService) -> None:
    with pytest.raises(TokenInvalidError):
        service.decode("not-a-jwt")


def test_missing_id_claim(service: JwtTokenService) -> None:
    now = int(datetime.now(UTC).timestamp())
    token = jwt.encode({"iat": now, "exp": now + 60}, "token-secret", algorithm="HS256")

    with pytest.raises(TokenInvalidError):
        service.decode(token)


def test_non_numeric_id_claim(service: JwtTokenService) -> None:
    now = int(datetime.now(UTC).timestamp())
    token = jwt.encode(
        {"id": "abc", "iat": now, "exp": now + 60}, "token-secret", algorithm="HS256"
    )

    with pytest.raises(TokenInvalidError):
        service.decode(token)


def test_werkzeug_hasher() -> None:
    hasher = WerkzeugPasswordHasher()
    hashed = hasher.hash("pass1234")

    assert hashed != "pass1234"
    assert hasher.verify("pass1234", hashed)
    assert not hasher.verify("pass12345", hashed)
    assert not hasher.verify("pass1234", "")
