from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from tourbook.application.services.password_hashing import WerkzeugPasswordHasher
from tourbook.application.use_cases.resources.tours import with_slug
from tourbook.domain.users.entities import Role, User
from tourbook.infrastructure.repositories.resources import TourRepository
from tourbook.infrastructure.repositories.users import SqlAlchemyUserRepository

BANFF = [-116.214531, 51.417611]
MIAMI = [-80.185942, 25.781842]


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    def send(self, recipient: User, url: str, kind: str) -> None:
        if self.fail:
            raise ConnectionError("smtp unavailable")
        self.sent.append((recipient.email, url, kind))

    def last_url(self, kind: str) -> str:
        return [url for _, url, sent_kind in self.sent if sent_kind == kind][-1]


def tour_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": "The Forest Hiker",
        "duration": 5,
        "max_group_size": 25,
        "difficulty": "easy",
        "price": 397,
        "summary": "Breathtaking hike through the Canadian Banff National Park",
        "image_cover": "tour-1-cover.jpg",
        "start_dates": ["2021-04-25T09:00:00Z", "2021-07-20T09:00:00Z"],
        "start_location": {"type": "Point", "coordinates": BANFF, "address": "Banff, CAN"},
    }
    data.update(overrides)
    return data


def create_tour(**overrides: Any) -> dict[str, Any]:
    return TourRepository().create(with_slug(tour_payload(**overrides)))


def create_user(
    name: str = "Laura Wilson",
    email: str = "laura@tourbook.io",
    password: str = "pass1234",
    role: Role | str = Role.USER,
) -> User:
    user = User(
        id=0,
        name=name,
        email=email,
        password_hash=WerkzeugPasswordHasher().hash(password),
        role=Role.parse(role),
        created_at=datetime.now(UTC),
    )
    return SqlAlchemyUserRepository().add(user)


def bearer(container, user_id: int, now: datetime | None = None) -> dict[str, str]:
    token = container.token_service.issue(user_id, now).token
    return {"Authorization": f"Bearer {token}"}
