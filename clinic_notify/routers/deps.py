from fastapi import Request

from clinic_notify.config import Settings
from clinic_notify.services.notifications import NotificationDispatcher
from clinic_notify.services.otp import OtpStore


def get_otp_store(request: Request) -> OtpStore:
    return request.app.state.otp_store


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
