from fastapi import APIRouter, Depends, status

from clinic_notify.errors import ApiError
from clinic_notify.routers.deps import get_dispatcher
from clinic_notify.schemas.email import NotificationSendError
from clinic_notify.schemas.notifications import (
    MeetingScheduled,
    NotificationBase,
    NotificationRequest,
    NotificationResponse,
    RegistrationComplete,
    RequestSubmitted,
    ReservationApproved,
    ReservationDeclined,
    ReservationSubmitted,
    VerificationApproved,
)
from clinic_notify.services.notifications import NotificationDispatcher

router = APIRouter(tags=["notifications"])


def _send(
    notification: NotificationBase, dispatcher: NotificationDispatcher
) -> NotificationResponse:
    try:
        dispatcher.dispatch(notification)
    except NotificationSendError as exc:
        raise ApiError(
            status_code=status.HTTP_502_BAD_GATEWAY,
            code="send_failed",
            message=notification.failure_message,
        ) from exc
    return NotificationResponse(message=notification.success_message)


@router.post("/notifications", response_model=NotificationResponse)
def send_notification(
    payload: NotificationRequest,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload.root, dispatcher)


@router.post("/send-request-email", response_model=NotificationResponse)
def send_request_email(
    payload: RequestSubmitted,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)


@router.post("/verified-doctor-email", response_model=NotificationResponse)
def send_verified_doctor_email(
    payload: VerificationApproved,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)


@router.post("/doctor-register-successful", response_model=NotificationResponse)
def send_registration_email(
    payload: RegistrationComplete,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)


@router.post(
    "/doctor-reserver-request-successful", response_model=NotificationResponse
)
def send_reservation_request_email(
    payload: ReservationSubmitted,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)


@router.post("/approve-patient-requests", response_model=NotificationResponse)
def send_approval_email(
    payload: ReservationApproved,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)


@router.post("/decline-patient-requests", response_model=NotificationResponse)
def send_decline_email(
    payload: ReservationDeclined,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)


@router.post("/send-meeting-email", response_model=NotificationResponse)
def send_meeting_email(
    payload: MeetingScheduled,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationResponse:
    return _send(payload, dispatcher)
