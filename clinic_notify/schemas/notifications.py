from datetime import date, time
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    RootModel,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _drop_blank_values(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    return {
        key: value
        for key, value in data.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }


def _date_part(value: Any) -> Any:
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def treat_blank_as_missing(cls, data: Any) -> Any:
        return _drop_blank_values(data)


class RecipientMixin(CamelModel):
    email: EmailStr


class ReservationMixin(CamelModel):
    doctor: str = Field(max_length=100)
    department: str = Field(max_length=100)
    reservation_date: date
    reservation_time: time

    @field_validator("reservation_date", mode="before")
    @classmethod
    def strip_time_component(cls, value: Any) -> Any:
        return _date_part(value)


class NotificationBase(RecipientMixin):
    """A single transactional email.

    Each subclass is one notification kind: its ``kind`` tag, the fields the
    email needs, the subject line and the template that renders it.
    """

    subject_line: ClassVar[str]
    template_name: ClassVar[str]
    success_message: ClassVar[str] = "Email sent successfully."
    failure_message: ClassVar[str] = "An error occurred while sending the email."

    @property
    def recipient(self) -> str:
        return self.email


class RequestSubmitted(NotificationBase):
    kind: Literal["request-submitted"] = "request-submitted"
    name: str = Field(max_length=100)
    department: str = Field(max_length=100)

    subject_line: ClassVar[str] = "Doctor Request Submitted Successfully"
    template_name: ClassVar[str] = "request_submitted"


class VerificationApproved(NotificationBase):
    kind: Literal["verification-approved"] = "verification-approved"
    department: str = Field(max_length=100)
    secret_code: str = Field(max_length=64)

    subject_line: ClassVar[str] = "Doctor Verification Successful"
    template_name: ClassVar[str] = "verification_approved"
    success_message: ClassVar[str] = "Verification email sent successfully."
    failure_message: ClassVar[str] = (
        "An error occurred while sending the verification email."
    )


class RegistrationComplete(NotificationBase):
    kind: Literal["registration-complete"] = "registration-complete"
    name: str = Field(max_length=100)
    department: str = Field(max_length=100)
    degree: str = Field(max_length=100)

    subject_line: ClassVar[str] = "Doctor Registration Successful"
    template_name: ClassVar[str] = "registration_complete"
    success_message: ClassVar[str] = "Registration email sent successfully."
    failure_message: ClassVar[str] = (
        "An error occurred while sending the registration email."
    )


class OtpIssued(NotificationBase, ReservationMixin):
    kind: Literal["otp-issued"] = "otp-issued"
    code: str

    subject_line: ClassVar[str] = "Doctor Reservation OTP"
    template_name: ClassVar[str] = "otp_issued"
    success_message: ClassVar[str] = "OTP sent successfully."
    failure_message: ClassVar[str] = "An error occurred while sending the OTP."


class ReservationNotification(NotificationBase, ReservationMixin):
    name: str = Field(max_length=100)


class ReservationSubmitted(ReservationNotification):
    kind: Literal["reservation-submitted"] = "reservation-submitted"

    subject_line: ClassVar[str] = "Doctor Reservation Request Submitted Successfully"
    template_name: ClassVar[str] = "reservation_submitted"
    success_message: ClassVar[str] = "Reservation request email sent successfully."
    failure_message: ClassVar[str] = (
        "An error occurred while sending the reservation request email."
    )


class ReservationApproved(ReservationNotification):
    kind: Literal["reservation-approved"] = "reservation-approved"

    subject_line: ClassVar[str] = "Patient Request Approved"
    template_name: ClassVar[str] = "reservation_approved"
    success_message: ClassVar[str] = "Approval email sent successfully."
    failure_message: ClassVar[str] = (
        "An error occurred while sending the approval email."
    )


class ReservationDeclined(ReservationNotification):
    kind: Literal["reservation-declined"] = "reservation-declined"

    subject_line: ClassVar[str] = "Patient Request Declined"
    template_name: ClassVar[str] = "reservation_declined"
    success_message: ClassVar[str] = "Decline email sent successfully."
    failure_message: ClassVar[str] = (
        "An error occurred while sending the decline email."
    )


class MeetingScheduled(NotificationBase):
    kind: Literal["meeting-scheduled"] = "meeting-scheduled"
    name: str = Field(max_length=100)
    meeting_link: str = Field(max_length=2048)
    meeting_date: date
    meeting_time: time

    subject_line: ClassVar[str] = "Your Online Consultation Link"
    template_name: ClassVar[str] = "meeting_scheduled"
    failure_message: ClassVar[str] = "Failed to send meeting email."

    @field_validator("meeting_date", mode="before")
    @classmethod
    def strip_time_component(cls, value: Any) -> Any:
        return _date_part(value)

    @field_validator("meeting_link")
    @classmethod
    def validate_link(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("Meeting link must be an http(s) URL")
        return value


# Kinds a caller may request directly; otp-issued is only sent by the
# challenge endpoint, which owns the code.
DirectNotification = Annotated[
    Union[
        RequestSubmitted,
        VerificationApproved,
        RegistrationComplete,
        ReservationSubmitted,
        ReservationApproved,
        ReservationDeclined,
        MeetingScheduled,
    ],
    Field(discriminator="kind"),
]


class NotificationRequest(RootModel[DirectNotification]):
    pass


class NotificationResponse(BaseModel):
    message: str
