from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from clinic_notify.config import Settings
from clinic_notify.routers.deps import get_otp_store, get_settings
from clinic_notify.services.otp import OtpStore

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    service: str
    mail_transport: str
    pending_challenges: int
    timestamp: datetime


@router.get("", response_model=HealthResponse)
def health(
    settings: Settings = Depends(get_settings),
    otp_store: OtpStore = Depends(get_otp_store),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        mail_transport=settings.mail_transport,
        pending_challenges=len(otp_store),
        timestamp=datetime.now(timezone.utc),
    )
