# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transactional email delivery (welcome and password-reset messages)."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from tourbook.domain.users.entities import User
from tourbook.domain.users.repositories import Notifier
from tourbook.shared.config.settings import EmailConfig
from tourbook.shared.logging import logger

WELCOME = "welcome"
PASSWORD_RESET = "password_reset"

_SUBJECTS = {
    WELCOME: "Welcome to the Tourbook family!",
    PASSWORD_RESET: "Your password reset token (valid for only 10 minutes)",
}


def _first_name(user: User) -> str:
    return user.name.split(" ")[0] if user.name else ""


def render(recipient: User, url: str, kind: str) -> tuple[str, str]:
    if kind not in _SUBJECTS:
        raise ValueError(f"unknown notification kind: {kind!r}")
    if kind == PASSWORD_RESET:
        body = (
            f"Hi {_first_name(recipient)},\n\n"
            "Forgot your password? Submit a PATCH request with your new password and "
            f"password_confirm to: {url}\n"
            "If you didn't forget your password, please ignore this email!\n"
        )
    else:
        body = (
            f"Hi {_first_name(recipient)},\n\n"
            f"Welcome to Tourbook, we're glad to have you. Upload your photo at {url}\n"
        )
    return _SUBJECTS[kind], body


class SmtpNotifier(Notifier):
    def __init__(self, config: EmailConfig, *, attempts: int = 3) -> None:
        self._config = config
        self._attempts = attempts

    def _deliver(self, message: EmailMessage) -> None:
        config = self._config
        with smtplib.SMTP(config.host, config.port, timeout=config.timeout) as smtp:
            if config.use_tls:
                smtp.starttls()
            if config.username:
                smtp.login(config.username, config.password or "")
            smtp.send_message(message)

    def send(self, recipient: User, url: str, kind: str) -> None:
        subject, body = render(recipient, url, kind)
        message = EmailMessage()
        message["From"] = self._config.sender
        message["To"] = recipient.email
        message["Subject"] = subject
        message.set_content(body)

        retry = Retrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=0.5, max=4),
            retry=retry_if_exception_type((smtplib.SMTPException, OSError)),
            reraise=True,
        )
        for attempt in retry:
            with attempt:
                logger.debug(
                    f"email: attempt={attempt.retry_state.attempt_number} kind={kind} "
                    f"user_id={recipient.id}"
                )
                self._deliver(message)
        logger.info(f"email: sent kind={kind} user_id={recipient.id}")


class LoggingNotifier(Notifier):
    """Development backend: writes the message to the log instead of sending it."""

    def send(self, recipient: User, url: str, kind: str) -> None:
        subject, _ = render(recipient, url, kind)
        logger.info(f"email[log]: kind={kind} user_id={recipient.id} subject={subject!r}")


def build_notifier(config: EmailConfig) -> Notifier:
    if config.backend == "smtp":
        return SmtpNotifier(config)
    return LoggingNotifier()


__all__ = [
    "LoggingNotifier",
    "PASSWORD_RESET",
    "SmtpNotifier",
    "WELCOME",
    "build_notifier",
    "render",
]
