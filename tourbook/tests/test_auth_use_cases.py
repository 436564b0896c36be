from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from tourbook.application.services.tokens import JwtTokenService
from tourbook.application.use_cases.users.authenticate import AuthenticateUseCase, ensure_role
from tourbook.application.use_cases.users.forgot_password import (
    RESET_PATH,
    ForgotPasswordUseCase,
)
from tourbook.application.use_cases.users.login import LoginUseCase
from tourbook.application.use_cases.users.passwords import hash_reset_token
from tourbook.application.use_cases.users.profile import (
    DeactivateUserUseCase,
    UpdateProfileUseCase,
)
from tourbook.application.use_cases.users.reset_password import ResetPasswordUseCase
from tourbook.application.use_cases.users.signup import SignupUseCase
from tourbook.application.use_cases.users.update_password import UpdatePasswordUseCase
from tourbook.domain.users.entities import Role, User
from tourbook.domain.users.exceptions import (
    EmailNotFoundError,
    EmailTakenError,
    InvalidCredentialsError,
    PasswordChangedError,
    PasswordFieldNotAllowedError,
    PasswordMismatchError,
    ResetEmailDeliveryError,
    ResetTokenInvalidError,
    RoleNotAllowedError,
    TokenMissingError,
    UserNoLongerExistsError,
    WrongPasswordError,
)
from tourbook.domain.users.repositories import PasswordHasher, UserRepository
from tourbook.infrastructure.repositories.resources import UserResourceRepository
from tourbook.infrastructure.repositories.users import SqlAlchemyUserRepository
from tourbook.tests.factories import RecordingNotifier, create_user


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1

    def find_by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email == email and user.active:
                return user
        return None

    def find_by_id(self, user_id: int) -> User | None:
        user = self._users.get(user_id)
        return user if user is not None and user.active else None

    def find_by_reset_token(self, hashed_token: str, now: datetime) -> User | None:
        for user in self._users.values():
            if user.active and user.reset_token_matches(hashed_token, now):
                return user
        return None

    def email_taken(self, email: str) -> bool:
        return any(user.email == email for user in self._users.values())

    def add(self, user: User) -> User:
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user

    def save(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> User | None:
        user = self.find_by_id(user_id)
        if user is None:
            return None
        updated = replace(user, **dict(changes))
        self._users[user_id] = updated
        return updated

    def deactivate(self, user_id: int) -> None:
        self._users[user_id] = replace(self._users[user_id], active=False)


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens() -> JwtTokenService:
    return JwtTokenService(secret="use-case-secret", ttl=timedelta(days=1))


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def signup(
    users: InMemoryUserRepository, tokens: JwtTokenService, notifier: RecordingNotifier
) -> SignupUseCase:
    return SignupUseCase(
        users=users, password_hasher=DeterministicHasher(), tokens=tokens, notifier=notifier
    )


def _register(signup: SignupUseCase, email: str = "jonas@tourbook.io") -> User:
    user, _ = signup.execute(
        "Jonas Schmedtmann", email, "pass1234", "pass1234", welcome_url="http://x/me"
    )
    return user


def test_signup_creates_user_and_sends_welcome(
    signup: SignupUseCase,
    users: InMemoryUserRepository,
    tokens: JwtTokenService,
    notifier: RecordingNotifier,
) -> None:
    user, issued = signup.execute(
        " Jonas ", "Jonas@Tourbook.IO", "pass1234", "pass1234", welcome_url="http://x/me"
    )

    assert user.id == 1
    assert user.name == "Jonas"
    assert user.email == "jonas@tourbook.io"
    assert user.role is Role.USER
    assert user.password_hash == "hashed:pass1234"
    assert tokens.decode(issued.token).user_id == 1
    assert notifier.sent == [("jonas@tourbook.io", "http://x/me", "welcome")]


def test_signup_rejects_mismatched_confirmation(signup: SignupUseCase) -> None:
    with pytest.raises(PasswordMismatchError):
        signup.execute("Jonas", "jonas@tourbook.io", "pass1234", "pass4321", welcome_url="u")


def test_signup_rejects_taken_email(signup: SignupUseCase) -> None:
    _register(signup)

    with pytest.raises(EmailTakenError):
        _register(signup, email="JONAS@tourbook.io")


def test_signup_survives_welcome_delivery_failure(
    signup: SignupUseCase, notifier: RecordingNotifier
) -> None:
    notifier.fail = True

    user = _register(signup)

    assert user.id == 1
    assert notifier.sent == []


def test_login_success_and_failure(
    signup: SignupUseCase, users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    _register(signup)
    login = LoginUseCase(users=users, password_hasher=DeterministicHasher(), tokens=tokens)

    user, issued = login.execute("jonas@tourbook.io", "pass1234")
    assert tokens.decode(issued.token).user_id == user.id

    with pytest.raises(InvalidCredentialsError):
        login.execute("jonas@tourbook.io", "wrong-pass")
    with pytest.raises(InvalidCredentialsError):
        login.execute("nobody@tourbook.io", "pass1234")


def test_authenticate_resolves_identity(
    signup: SignupUseCase, users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    user = _register(signup)
    authenticate = AuthenticateUseCase(users=users, tokens=tokens)

    assert authenticate.execute(tokens.issue(user.id).token).id == user.id

    with pytest.raises(TokenMissingError):
        authenticate.execute(None)


def test_authenticate_rejects_deactivated_user(
    signup: SignupUseCase, users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    user = _register(signup)
    token = tokens.issue(user.id).token
    DeactivateUserUseCase(users=users).execute(user)

    with pytest.raises(UserNoLongerExistsError):
        AuthenticateUseCase(users=users, tokens=tokens).execute(token)


def test_authenticate_rejects_token_older_than_password_change(
    signup: SignupUseCase, users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    user = _register(signup)
    stale = tokens.issue(user.id, datetime.now(UTC) - timedelta(hours=1)).token

    update = UpdatePasswordUseCase(
        users=users, password_hasher=DeterministicHasher(), tokens=tokens
    )
    _, fresh = update.execute(user.id, "pass1234", "newpass99", "newpass99")

    authenticate = AuthenticateUseCase(users=users, tokens=tokens)
    with pytest.raises(PasswordChangedError):
        authenticate.execute(stale)
    assert authenticate.execute(fresh.token).id == user.id


def test_update_password_requires_current_password(
    signup: SignupUseCase, users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    user = _register(signup)
    update = UpdatePasswordUseCase(
        users=users, password_hasher=DeterministicHasher(), tokens=tokens
    )

    with pytest.raises(WrongPasswordError):
        update.execute(user.id, "not-it", "newpass99", "newpass99")
    with pytest.raises(PasswordMismatchError):
        update.execute(user.id, "pass1234", "newpass99", "newpass00")

    updated, _ = update.execute(user.id, "pass1234", "newpass99", "newpass99")
    assert updated.password_hash == "hashed:newpass99"
    assert updated.password_changed_at is not None


def test_ensure_role() -> None:
    guide = User(id=1, name="Guide", email="g@tourbook.io", password_hash="h", role=Role.GUIDE)

    ensure_role(guide, [Role.GUIDE, "admin"])
    with pytest.raises(RoleNotAllowedError) as excinfo:
        ensure_role(guide, ["admin", "lead-guide"])
    assert excinfo.value.context == {"role": "guide", "allowed": ["admin", "lead-guide"]}


def test_forgot_password_stores_hashed_token(
    signup: SignupUseCase, users: InMemoryUserRepository, notifier: RecordingNotifier
) -> None:
    user = _register(signup)
    forgot = ForgotPasswordUseCase(users=users, notifier=notifier)

    url = forgot.execute("jonas@tourbook.io", base_url="http://127.0.0.1:5000/")

    prefix = f"http://127.0.0.1:5000{RESET_PATH}"
    assert url.startswith(prefix)
    token = url[len(prefix):]
    assert len(token) == 64
    stored = users.find_by_id(user.id)
    assert stored.password_reset_token == hash_reset_token(token)
    assert stored.password_reset_expires > datetime.now(UTC) + timedelta(minutes=9)
    assert notifier.last_url("password_reset") == url


def test_forgot_password_unknown_email(
    users: InMemoryUserRepository, notifier: RecordingNotifier
) -> None:
    with pytest.raises(EmailNotFoundError):
        ForgotPasswordUseCase(users=users, notifier=notifier).execute(
            "ghost@tourbook.io", base_url="http://x"
        )


def test_forgot_password_clears_token_when_delivery_fails(
    signup: SignupUseCase, users: InMemoryUserRepository, notifier: RecordingNotifier
) -> None:
    user = _register(signup)
    notifier.fail = True

    with pytest.raises(ResetEmailDeliveryError):
        ForgotPasswordUseCase(users=users, notifier=notifier).execute(
            "jonas@tourbook.io", base_url="http://x"
        )

    stored = users.find_by_id(user.id)
    assert stored.password_reset_token is None
    assert stored.password_reset_expires is None


def test_reset_password_is_single_use(
    signup: SignupUseCase,
    users: InMemoryUserRepository,
    tokens: JwtTokenService,
    notifier: RecordingNotifier,
) -> None:
    user = _register(signup)
    url = ForgotPasswordUseCase(users=users, notifier=notifier).execute(
        "jonas@tourbook.io", base_url="http://x"
    )
    token = url.rsplit("/", 1)[-1]
    reset = ResetPasswordUseCase(users=users, password_hasher=DeterministicHasher(), tokens=tokens)

    with pytest.raises(PasswordMismatchError):
        reset.execute(token, "brandnew1", "brandnew2")

    updated, issued = reset.execute(token, "brandnew1", "brandnew1")

    assert updated.id == user.id
    assert updated.password_hash == "hashed:brandnew1"
    assert updated.password_reset_token is None
    assert tokens.decode(issued.token).user_id == user.id
    with pytest.raises(ResetTokenInvalidError):
        reset.execute(token, "another1", "another1")


def test_reset_password_rejects_expired_token(
    signup: SignupUseCase, users: InMemoryUserRepository, tokens: JwtTokenService
) -> None:
    user = _register(signup)
    users.save(
        user.with_reset_token(hash_reset_token("abc"), datetime.now(UTC) - timedelta(seconds=1))
    )
    reset = ResetPasswordUseCase(users=users, password_hasher=DeterministicHasher(), tokens=tokens)

    with pytest.raises(ResetTokenInvalidError):
        reset.execute("abc", "brandnew1", "brandnew1")


def test_update_profile(signup: SignupUseCase, users: InMemoryUserRepository) -> None:
    user = _register(signup)
    _register(signup, email="other@tourbook.io")
    update = UpdateProfileUseCase(users=users)

    with pytest.raises(PasswordFieldNotAllowedError):
        update.execute(user, {"password": "x"})
    with pytest.raises(EmailTakenError):
        update.execute(user, {"email": "other@tourbook.io"})

    updated = update.execute(
        user, {"name": "Jonas S", "email": "New@Tourbook.io", "role": "admin"}
    )

    assert updated.name == "Jonas S"
    assert updated.email == "new@tourbook.io"
    assert updated.role is Role.USER


def test_saving_a_deleted_user_raises_typed_error() -> None:
    user = create_user()
    UserResourceRepository().delete(user.id)

    with pytest.raises(UserNoLongerExistsError) as excinfo:
        SqlAlchemyUserRepository().save(user.with_password("hashed:new", datetime.now(UTC)))

    assert excinfo.value.status == 401
    assert excinfo.value.code == "user_not_found"
