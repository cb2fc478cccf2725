import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic_notify.config import Settings, settings as default_settings
from clinic_notify.errors import install_exception_handlers
from clinic_notify.routers import health, notifications, otp
from clinic_notify.services.email import MailSender, build_mail_sender
from clinic_notify.services.notifications import NotificationDispatcher, TemplateRenderer
from clinic_notify.services.otp import OtpStore

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "Starting %s transport=%s otp_ttl=%ss",
        settings.app_name,
        settings.mail_transport,
        settings.otp_ttl_seconds,
    )
    yield
    # Pending challenges do not survive a restart.
    app.state.otp_store.clear()
    logger.info("Shutdown complete")


def create_app(
    settings: Settings = default_settings,
    otp_store: Optional[OtpStore] = None,
    mail_sender: Optional[MailSender] = None,
) -> FastAPI:
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    if otp_store is None:
        otp_store = OtpStore(
            ttl_seconds=settings.otp_ttl_seconds,
            code_length=settings.otp_length,
        )
    if mail_sender is None:
        mail_sender = build_mail_sender(settings)
    app.state.otp_store = otp_store
    app.state.dispatcher = NotificationDispatcher(
        sender=mail_sender,
        from_address=settings.email_sender,
        renderer=TemplateRenderer(organization_name=settings.organization_name),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_exception_handlers(app)

    app.include_router(health.router, prefix="/api")
    app.include_router(otp.router, prefix="/api")
    app.include_router(notifications.router, prefix="/api")

    @app.get("/")
    def root():
        return {"status": "Backend running"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "clinic_notify.main:app",
        host=default_settings.host,
        port=default_settings.port,
    )
