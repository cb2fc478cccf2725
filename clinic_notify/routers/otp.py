from fastapi import APIRouter, Depends, status

from clinic_notify.config import Settings
from clinic_notify.errors import ApiError
from clinic_notify.routers.deps import get_dispatcher, get_otp_store, get_settings
from clinic_notify.schemas.email import NotificationSendError
from clinic_notify.schemas.otp import (
    OtpResponse,
    OtpVerifyRequest,
    OtpVerifyResponse,
    ReservationOtpRequest,
)
from clinic_notify.services.notifications import NotificationDispatcher
from clinic_notify.services.otp import OtpOutcome, OtpStore

router = APIRouter(tags=["otp"])

_FAILURES = {
    OtpOutcome.NOT_FOUND: ("otp_not_found", "OTP not found for this email."),
    OtpOutcome.EXPIRED: ("otp_expired", "OTP has expired."),
    OtpOutcome.MISMATCH: ("otp_mismatch", "Invalid OTP."),
}


@router.post(
    "/reserving-doctor-otp",
    response_model=OtpResponse,
    response_model_exclude_none=True,
)
def request_reservation_otp(
    payload: ReservationOtpRequest,
    otp_store: OtpStore = Depends(get_otp_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_settings),
) -> OtpResponse:
    record = otp_store.issue(payload.email)
    notification = payload.to_notification(record.code)
    try:
        dispatcher.dispatch(
            notification,
            lifetime_minutes=max(1, otp_store.ttl_seconds // 60),
        )
    except NotificationSendError as exc:
        # The challenge stays issued; the caller may request a new one.
        raise ApiError(
            status_code=status.HTTP_502_BAD_GATEWAY,
            code="send_failed",
            message=notification.failure_message,
        ) from exc
    return OtpResponse(
        message=notification.success_message,
        expires_in_seconds=otp_store.ttl_seconds,
        otp=record.code if settings.otp_debug else None,
    )


@router.post("/verify-otp", response_model=OtpVerifyResponse)
def verify_otp(
    payload: OtpVerifyRequest,
    otp_store: OtpStore = Depends(get_otp_store),
) -> OtpVerifyResponse:
    outcome = otp_store.validate(payload.email, payload.otp)
    if outcome is not OtpOutcome.VALID:
        code, message = _FAILURES[outcome]
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
            message=message,
        )
    return OtpVerifyResponse(message="OTP verified successfully.", verified=True)
