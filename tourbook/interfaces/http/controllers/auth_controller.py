# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from tourbook.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from tourbook.application.use_cases.users.login import LoginUseCase
from tourbook.application.use_cases.users.reset_password import ResetPasswordUseCase
from tourbook.application.use_cases.users.signup import SignupUseCase
from tourbook.application.use_cases.users.update_password import UpdatePasswordUseCase
from tourbook.infrastructure.audit import AuditAction, audit_log
from tourbook.interfaces.http.auth import AuthGuard, current_user
from tourbook.interfaces.http.dto import parse_body
from tourbook.interfaces.http.dto.auth import (
    ForgotPasswordRequestDTO,
    LoginRequestDTO,
    ResetPasswordRequestDTO,
    SignupRequestDTO,
    UpdatePasswordRequestDTO,
)
from tourbook.interfaces.http.responses import logged_out_response, token_response
from tourbook.shared.config import load_config
from tourbook.shared.errors.base import AppError
from tourbook.shared.logging import logger
from tourbook.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _base_url() -> str:
    return load_config().base_url or request.host_url


class AuthController:
    def __init__(
        self,
        *,
        guard: AuthGuard,
        signup_use_case: SignupUseCase,
        login_use_case: LoginUseCase,
        forgot_password_use_case: ForgotPasswordUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        update_password_use_case: UpdatePasswordUseCase,
    ) -> None:
        self._guard = guard
        self._signup = signup_use_case
        self._login = login_use_case
        self._forgot_password = forgot_password_use_case
        self._reset_password = reset_password_use_case
        self._update_password = update_password_use_case

    def signup(self) -> tuple[Response, int]:
        dto = parse_body(SignupRequestDTO)
        user, issued = self._signup.execute(
            dto.name,
            str(dto.email),
            dto.password,
            dto.password_confirm,
            welcome_url=f"{_base_url().rstrip('/')}/api/v1/users/me",
        )
        audit_log(AuditAction.SIGNUP, user_id=user.id, ip_address=_get_client_ip())
        logger.info(f"auth.signup: ok user_id={user.id}")
        return token_response(user, issued, status=HTTPStatus.CREATED)

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        dto = parse_body(LoginRequestDTO)
        ip_address = _get_client_ip()
        try:
            user, issued = self._login.execute(str(dto.email), dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise
        audit_log(AuditAction.LOGIN_SUCCESS, user_id=user.id, ip_address=ip_address)
        logger.info(f"auth.login: ok user_id={user.id}")
        return token_response(user, issued)

    def logout(self) -> tuple[Response, int]:
        audit_log(AuditAction.LOGOUT, ip_address=_get_client_ip())
        logger.info("auth.logout: ok")
        return logged_out_response()

    @rate_limit(limit=5, window_seconds=60.0)
    def forgot_password(self) -> tuple[Response, int]:
        dto = parse_body(ForgotPasswordRequestDTO)
        self._forgot_password.execute(str(dto.email), base_url=_base_url())
        audit_log(AuditAction.PASSWORD_RESET_REQUESTED, ip_address=_get_client_ip())
        return jsonify({"status": "success", "message": "Token sent to email!"}), HTTPStatus.OK

    def reset_password(self, token: str) -> tuple[Response, int]:
        dto = parse_body(ResetPasswordRequestDTO)
        user, issued = self._reset_password.execute(token, dto.password, dto.password_confirm)
        audit_log(AuditAction.PASSWORD_RESET, user_id=user.id, ip_address=_get_client_ip())
        return token_response(user, issued)

    def update_my_password(self) -> tuple[Response, int]:
        dto = parse_body(UpdatePasswordRequestDTO)
        user, issued = self._update_password.execute(
            current_user().id, dto.password_current, dto.password, dto.password_confirm
        )
        audit_log(AuditAction.PASSWORD_CHANGED, user_id=user.id, ip_address=_get_client_ip())
        return token_response(user, issued)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/v1/users")
        bp.add_url_rule("/signup", view_func=self.signup, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["GET"])
        bp.add_url_rule("/forgot-password", view_func=self.forgot_password, methods=["POST"])
        bp.add_url_rule(
            "/reset-password/<token>", view_func=self.reset_password, methods=["PATCH"]
        )
        bp.add_url_rule(
            "/update-my-password",
            view_func=self._guard.protect(self.update_my_password),
            methods=["PATCH"],
        )
        return bp
