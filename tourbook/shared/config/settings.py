# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "")

_NESTED_CONFIG = SettingsConfigDict(
    env_file=".env", env_file_encoding="utf-8", extra="ignore", validate_by_name=True
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///tourbook.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _NESTED_CONFIG


class JwtConfig(BaseSettings):
    secret: str = Field("dev", alias="JWT_SECRET")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    expires_in_days: int = Field(90, ge=1, alias="JWT_EXPIRES_IN_DAYS")
    cookie_expires_in_days: int = Field(90, ge=1, alias="JWT_COOKIE_EXPIRES_IN_DAYS")

    model_config = _NESTED_CONFIG


class EmailConfig(BaseSettings):
    backend: str = Field("log", alias="EMAIL_BACKEND")
    host: str = Field("localhost", alias="EMAIL_HOST")
    port: int = Field(2525, ge=1, alias="EMAIL_PORT")
    username: str | None = Field(None, alias="EMAIL_USERNAME")
    password: str | None = Field(None, alias="EMAIL_PASSWORD")
    sender: str = Field("Tourbook <hello@tourbook.io>", alias="EMAIL_FROM")
    use_tls: bool = Field(False, alias="EMAIL_USE_TLS")
    timeout: float = Field(10.0, ge=0.1, alias="EMAIL_TIMEOUT")

    model_config = _NESTED_CONFIG

    @field_validator("backend", mode="before")
    @classmethod
    def _parse_backend(cls, value: str) -> str:
        value = str(value).strip().lower()
        if value not in ("smtp", "log"):
            raise ValueError("EMAIL_BACKEND must be 'smtp' or 'log'")
        return value

    @field_validator("use_tls", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class QueryConfig(BaseSettings):
    max_limit: int = Field(100, ge=1, alias="QUERY_MAX_LIMIT")

    model_config = _NESTED_CONFIG


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: list[str] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(100, alias="RL_LIMIT")
    rate_limit_window: float = Field(3600.0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _NESTED_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _jwt_config_factory() -> JwtConfig:
    return JwtConfig()  # type: ignore[call-arg]


def _email_config_factory() -> EmailConfig:
    return EmailConfig()  # type: ignore[call-arg]


def _query_config_factory() -> QueryConfig:
    return QueryConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    base_url: str | None = Field(None, alias="BASE_URL")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    jwt: JwtConfig = Field(default_factory=_jwt_config_factory)
    email: EmailConfig = Field(default_factory=_email_config_factory)
    query: QueryConfig = Field(default_factory=_query_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        insecure = [
            name
            for name, value in (("SECRET_KEY", self.secret_key), ("JWT_SECRET", self.jwt.secret))
            if value in _INSECURE_SECRETS
        ]
        if insecure:
            print(
                f"\n❌ CRITICAL SECURITY ERROR: Insecure {', '.join(insecure)} detected in production!\n"
                "   Secrets must be strong random values in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.email.backend == "log":
            warnings.append("⚠️  EMAIL_BACKEND=log, notifications are only written to the log")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "load_config"]
