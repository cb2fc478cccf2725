import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv(override=True)


def _env_bool(name: str, default: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: str = "") -> tuple[str, ...]:
    raw_value = os.getenv(name, default)
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "Clinic Notify")
    debug: bool = _env_bool("DEBUG", False)
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "*")
    )
    otp_length: int = int(os.getenv("OTP_LENGTH", "6"))
    otp_ttl_seconds: int = int(os.getenv("OTP_TTL_SECONDS", "300"))
    otp_debug: bool = _env_bool("OTP_DEBUG", False)
    mail_transport: str = os.getenv("MAIL_TRANSPORT", "smtp").strip().lower()
    mail_timeout_seconds: float = float(os.getenv("MAIL_TIMEOUT_SECONDS", "10"))
    email_user: str = os.getenv("EMAIL_USER", "")
    email_password: str = os.getenv("EMAIL_PASS", "")
    email_sender: str = os.getenv("EMAIL_FROM") or os.getenv("EMAIL_USER", "")
    smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "465"))
    smtp_use_ssl: bool = _env_bool("SMTP_USE_SSL", True)
    organization_name: str = os.getenv("ORGANIZATION_NAME", "Hospital Administration")


settings = Settings()
