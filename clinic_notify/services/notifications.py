from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from clinic_notify.schemas.email import EmailSendError, NotificationSendError
from clinic_notify.schemas.notifications import NotificationBase
from clinic_notify.services.email import MailSender

LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_time(value: time) -> str:
    suffix = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {suffix}"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


class TemplateRenderer:
    def __init__(
        self,
        template_dir: Path = TEMPLATE_DIR,
        organization_name: str = "Hospital Administration",
    ) -> None:
        self._organization_name = organization_name
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html.jinja", "html"]),
            undefined=StrictUndefined,
        )
        self._env.filters["format_date"] = format_date
        self._env.filters["format_time"] = format_time

    def render(self, notification: NotificationBase, **context: Any) -> RenderedEmail:
        values = notification.model_dump()
        values.update(context)
        values.setdefault("organization_name", self._organization_name)
        name = notification.template_name
        html = self._env.get_template(f"{name}.html.jinja").render(**values)
        text = self._env.get_template(f"{name}.txt.jinja").render(**values)
        return RenderedEmail(
            subject=notification.subject_line,
            html=html,
            text=text.strip() + "\n",
        )


class NotificationDispatcher:
    """Render a notification and hand it to the mail sender, once."""

    def __init__(
        self,
        sender: MailSender,
        from_address: str,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self._sender = sender
        self._from_address = from_address
        self._renderer = renderer or TemplateRenderer()

    def render(self, notification: NotificationBase, **context: Any) -> RenderedEmail:
        return self._renderer.render(notification, **context)

    def build_message(self, rendered: RenderedEmail, recipient: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._from_address
        message["To"] = recipient
        message["Subject"] = rendered.subject
        message.set_content(rendered.text)
        message.add_alternative(rendered.html, subtype="html")
        return message

    def dispatch(self, notification: NotificationBase, **context: Any) -> None:
        if not self._from_address:
            LOGGER.error("Email sender address is not configured")
            raise NotificationSendError("Email sender is not configured")

        try:
            rendered = self.render(notification, **context)
            message = self.build_message(rendered, notification.recipient)
            self._sender.send(message)
        except EmailSendError as exc:
            LOGGER.error(
                "Failed to send %s email to=%s: %s",
                notification.kind,
                notification.recipient,
                exc,
            )
            raise NotificationSendError(str(exc)) from exc
        except ValueError as exc:
            # email.headerregistry rejects CR/LF and malformed addresses.
            LOGGER.error(
                "Cannot build %s email to=%r: %s",
                notification.kind,
                notification.recipient,
                exc,
            )
            raise NotificationSendError("Invalid email headers") from exc
        except Exception as exc:
            LOGGER.exception(
                "Unexpected error sending %s email to=%s",
                notification.kind,
                notification.recipient,
            )
            raise NotificationSendError("Unexpected mail transport failure") from exc
        LOGGER.info("Sent %s email to=%s", notification.kind, notification.recipient)
