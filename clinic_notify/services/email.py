from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from clinic_notify.config import Settings
from clinic_notify.schemas.email import EmailSendError

LOGGER = logging.getLogger(__name__)


class MailSender(Protocol):
    def send(self, message: EmailMessage) -> None:
        ...


class SmtpMailSender:
    """Deliver messages through an authenticated SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_ssl: bool = True,
        timeout: float = 10,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_ssl = use_ssl
        self._timeout = timeout

    def send(self, message: EmailMessage) -> None:
        if not self._username or not self._password:
            raise EmailSendError("SMTP credentials are not configured")
        try:
            with self._connect() as server:
                if not self._use_ssl:
                    server.starttls()
                server.login(self._username, self._password)
                server.send_message(message)
        except smtplib.SMTPException as exc:
            LOGGER.error(
                "SMTP error host=%s to=%s error=%s", self._host, message["To"], exc
            )
            raise EmailSendError("Failed to send email") from exc
        except OSError as exc:
            raise EmailSendError("Failed to reach SMTP server") from exc

    def _connect(self) -> smtplib.SMTP:
        if self._use_ssl:
            return smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout)
        return smtplib.SMTP(self._host, self._port, timeout=self._timeout)


def build_mail_sender(settings: Settings) -> MailSender:
    if settings.mail_transport == "smtp":
        return SmtpMailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_password,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.mail_timeout_seconds,
        )
    raise ValueError(f"Unsupported MAIL_TRANSPORT: {settings.mail_transport}")
