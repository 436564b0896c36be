# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourbook.infrastructure.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(254), unique=True, index=True)
    photo: Mapped[str] = mapped_column(String(256), default="default.jpg")
    role: Mapped[str] = mapped_column(String(16), default="user", index=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    password_changed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    password_reset_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    password_reset_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="1", index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    # write counter; concurrent writers are last-write-wins
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reviews: Mapped[list["Review"]] = relationship(
        "Review", back_populates="user", cascade="all,delete"
    )


class Tour(Base):
    __tablename__ = "tours"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(40), unique=True, index=True)
    slug: Mapped[str] = mapped_column(String(64), index=True)
    duration: Mapped[int] = mapped_column(Integer)
    max_group_size: Mapped[int] = mapped_column(Integer)
    difficulty: Mapped[str] = mapped_column(String(16), index=True)
    ratings_average: Mapped[float] = mapped_column(Float, default=4.5, index=True)
    ratings_quantity: Mapped[int] = mapped_column(Integer, default=0)
    price: Mapped[float] = mapped_column(Float, index=True)
    price_discount: Mapped[float | None] = mapped_column(Float, nullable=True)
    summary: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_cover: Mapped[str] = mapped_column(String(256))
    images: Mapped[list] = mapped_column(JSON, default=list)
    start_dates: Mapped[list] = mapped_column(JSON, default=list)
    secret_tour: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    # GeoJSON Point: {"type": "Point", "coordinates": [lng, lat], ...}
    start_location: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    locations: Mapped[list] = mapped_column(JSON, default=list)
    guides: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reviews: Mapped[list["Review"]] = relationship(
        "Review", back_populates="tour", cascade="all,delete"
    )

    @property
    def duration_weeks(self) -> float:
        return self.duration / 7


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("tour_id", "user_id", name="u_review_tour_user"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    review: Mapped[str] = mapped_column(String(500))
    rating: Mapped[float] = mapped_column(Float)
    tour_id: Mapped[int] = mapped_column(ForeignKey("tours.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tour: Mapped["Tour"] = relationship("Tour", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")


class Booking(Base):
    __tablename__ = "bookings"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tour_id: Mapped[int] = mapped_column(ForeignKey("tours.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    price: Mapped[float] = mapped_column(Float)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="1")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
