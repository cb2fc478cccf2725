from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from clinic_notify.schemas.notifications import OtpIssued, RecipientMixin, ReservationMixin


class ReservationOtpRequest(RecipientMixin, ReservationMixin):
    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    def to_notification(self, code: str) -> OtpIssued:
        return OtpIssued(code=code, **self.model_dump())


class OtpResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    expires_in_seconds: int
    otp: Optional[str] = None


class OtpVerifyRequest(RecipientMixin):
    otp: str = Field(min_length=1, max_length=32)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("otp", mode="before")
    @classmethod
    def coerce_numeric_code(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class OtpVerifyResponse(BaseModel):
    message: str
    verified: bool
