# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from tourbook.application.services.password_hashing import WerkzeugPasswordHasher
from tourbook.application.services.ratings import RatingsService
from tourbook.application.services.tokens import JwtTokenService
from tourbook.application.use_cases.resources.crud import ResourceService
from tourbook.application.use_cases.resources.reviews import ReviewService
from tourbook.application.use_cases.resources.tours import TourService
from tourbook.application.use_cases.resources.users import UserAdminService
from tourbook.application.use_cases.users.authenticate import AuthenticateUseCase
from tourbook.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from tourbook.application.use_cases.users.login import LoginUseCase
from tourbook.application.use_cases.users.profile import (
    DeactivateUserUseCase,
    UpdateProfileUseCase,
)
from tourbook.application.use_cases.users.reset_password import ResetPasswordUseCase
from tourbook.application.use_cases.users.signup import SignupUseCase
from tourbook.application.use_cases.users.update_password import UpdatePasswordUseCase
from tourbook.domain.users.repositories import Notifier
from tourbook.infrastructure.notifications.email import build_notifier
from tourbook.infrastructure.repositories.resources import (
    BookingRepository,
    ReviewRepository,
    TourRepository,
    UserResourceRepository,
)
from tourbook.infrastructure.repositories.users import SqlAlchemyUserRepository
from tourbook.interfaces.http.auth import AuthGuard
from tourbook.interfaces.http.controllers.auth_controller import AuthController
from tourbook.interfaces.http.controllers.bookings_controller import BookingsController
from tourbook.interfaces.http.controllers.misc_controller import MiscController
from tourbook.interfaces.http.controllers.reviews_controller import ReviewsController
from tourbook.interfaces.http.controllers.tours_controller import ToursController
from tourbook.interfaces.http.controllers.users_controller import UsersController
from tourbook.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_service(self) -> JwtTokenService:
        jwt = self._config.jwt
        return JwtTokenService(
            secret=jwt.secret,
            algorithm=jwt.algorithm,
            ttl=timedelta(days=jwt.expires_in_days),
        )

    @cached_property
    def notifier(self) -> Notifier:
        return build_notifier(self._config.email)

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def tour_repository(self) -> TourRepository:
        return TourRepository()

    @cached_property
    def review_repository(self) -> ReviewRepository:
        return ReviewRepository()

    @cached_property
    def booking_repository(self) -> BookingRepository:
        return BookingRepository()

    @cached_property
    def user_resource_repository(self) -> UserResourceRepository:
        return UserResourceRepository()

    # Resource services

    @cached_property
    def ratings_service(self) -> RatingsService:
        return RatingsService(reviews=self.review_repository, tours=self.tour_repository)

    @cached_property
    def tour_service(self) -> TourService:
        return TourService(
            repository=self.tour_repository, max_limit=self._config.query.max_limit
        )

    @cached_property
    def review_service(self) -> ReviewService:
        return ReviewService(
            repository=self.review_repository,
            tours=self.tour_repository,
            ratings=self.ratings_service,
            max_limit=self._config.query.max_limit,
        )

    @cached_property
    def booking_service(self) -> ResourceService:
        return ResourceService(
            repository=self.booking_repository, max_limit=self._config.query.max_limit
        )

    @cached_property
    def user_service(self) -> UserAdminService:
        return UserAdminService(
            repository=self.user_resource_repository,
            reviews=self.review_repository,
            ratings=self.ratings_service,
            max_limit=self._config.query.max_limit,
        )

    # Auth use cases

    @cached_property
    def authenticate_use_case(self) -> AuthenticateUseCase:
        return AuthenticateUseCase(users=self.user_repository, tokens=self.token_service)

    @cached_property
    def signup_use_case(self) -> SignupUseCase:
        return SignupUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
            notifier=self.notifier,
        )

    @cached_property
    def login_use_case(self) -> LoginUseCase:
        return LoginUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(users=self.user_repository, notifier=self.notifier)

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def update_password_use_case(self) -> UpdatePasswordUseCase:
        return UpdatePasswordUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(users=self.user_repository)

    @cached_property
    def deactivate_user_use_case(self) -> DeactivateUserUseCase:
        return DeactivateUserUseCase(users=self.user_repository)

    # Controllers

    @cached_property
    def auth_guard(self) -> AuthGuard:
        return AuthGuard(self.authenticate_use_case)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            guard=self.auth_guard,
            signup_use_case=self.signup_use_case,
            login_use_case=self.login_use_case,
            forgot_password_use_case=self.forgot_password_use_case,
            reset_password_use_case=self.reset_password_use_case,
            update_password_use_case=self.update_password_use_case,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            guard=self.auth_guard,
            users=self.user_service,
            update_profile=self.update_profile_use_case,
            deactivate=self.deactivate_user_use_case,
        )

    @cached_property
    def tours_controller(self) -> ToursController:
        return ToursController(
            guard=self.auth_guard, tours=self.tour_service, reviews=self.review_service
        )

    @cached_property
    def reviews_controller(self) -> ReviewsController:
        return ReviewsController(guard=self.auth_guard, reviews=self.review_service)

    @cached_property
    def bookings_controller(self) -> BookingsController:
        return BookingsController(guard=self.auth_guard, bookings=self.booking_service)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(guard=self.auth_guard)

    def controllers(self) -> list:
        return [
            self.misc_controller,
            self.auth_controller,
            self.users_controller,
            self.tours_controller,
            self.reviews_controller,
            self.bookings_controller,
        ]


container = Container()
