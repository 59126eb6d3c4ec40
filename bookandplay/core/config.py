import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Database
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "bookandplay.db")
    )
    DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000"))
    DB_POOL_TIMEOUT_SECONDS = int(os.getenv("DB_POOL_TIMEOUT_SECONDS", "10"))

    # Redis (optional)
    REDIS_URL = os.getenv("REDIS_URL")
    AVAILABILITY_CACHE_TTL_SECONDS = int(os.getenv("AVAILABILITY_CACHE_TTL_SECONDS", "60"))
    REDIS_RETRY_SECONDS = int(os.getenv("REDIS_RETRY_SECONDS", "30"))

    # Logs
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_ROTATION = os.getenv("LOG_ROTATION", "1 week")
    LOG_RETENTION = os.getenv("LOG_RETENTION", "4 weeks")
    ERROR_LOG_RETENTION = os.getenv("ERROR_LOG_RETENTION", "8 weeks")

    # Tariff boundaries: day time is [DAY_START_HOUR, DAY_END_HOUR)
    DAY_START_HOUR = int(os.getenv("DAY_START_HOUR", "6"))
    DAY_END_HOUR = int(os.getenv("DAY_END_HOUR", "18"))

    # Same-day slots starting before now + buffer are not offered
    SAME_DAY_BUFFER_MINUTES = int(os.getenv("SAME_DAY_BUFFER_MINUTES", "30"))

    # Confirm bookings at submit time instead of waiting for the owner
    AUTO_CONFIRM_BOOKINGS = _bool("AUTO_CONFIRM_BOOKINGS")

    # Fallback hours for venues that never stored theirs (repair job)
    DEFAULT_OPENING_TIME = os.getenv("DEFAULT_OPENING_TIME", "06:00")
    DEFAULT_CLOSING_TIME = os.getenv("DEFAULT_CLOSING_TIME", "23:00")


settings = Settings()
