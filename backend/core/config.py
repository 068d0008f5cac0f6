import enum
import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./divine_detailing.db")

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS")) or ["http://localhost:5173"]

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

ADMIN_EMAILS = _get_list(os.getenv("ADMIN_EMAILS"))

CATALOG_PATH = os.getenv("CATALOG_PATH", "")

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = _get_bool(os.getenv("SMTP_USE_TLS"), default=True)
SMTP_TIMEOUT_SECONDS = int(os.getenv("SMTP_TIMEOUT_SECONDS", "10"))
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Divine Detailing <noreply@divinedetailing.local>")
NOTIFY_ADMIN_EMAIL = os.getenv("NOTIFY_ADMIN_EMAIL", "")


class Slot(str, enum.Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"


SLOT_HOURS = {
    Slot.MORNING: "7am-12pm",
    Slot.AFTERNOON: "12pm-5pm",
}

BOOKING_WINDOW_DAYS = 60
MAX_SUMMARY_RANGE_DAYS = 93
STATUS_UPDATE_MAX_ATTEMPTS = 3

DEFAULT_DECLINE_REASON = "No reason provided"
DEFAULT_BLACKOUT_REASON = "Unavailable"

MAX_NAME_LENGTH = 120
MAX_VEHICLE_LENGTH = 200
MAX_SAVED_VEHICLES = 20
MAX_REASON_LENGTH = 500


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
