from loguru import logger
import os

from bookandplay.core.config import settings

FORMAT = "{time} | {level} | {message}"

# file name -> log_type routed into it
CATEGORY_LOGS = {
    "bookings.log": "booking",  # submit, confirm, cancel, conflicts
    "slots.log": "slots",  # slot grid generation
    "admin.log": "admin",  # venue review and closures
}


def _only(log_type):
    return lambda record: record["extra"].get("log_type") == log_type


def configure_logging(log_dir: str | None = None):
    """Replace every loguru sink with the app, category and error files under log_dir."""
    log_dir = log_dir or settings.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)

    logger.remove()

    logger.add(
        os.path.join(log_dir, "app.log"),
        rotation=settings.LOG_ROTATION,
        retention=settings.LOG_RETENTION,
        level=settings.LOG_LEVEL,
        enqueue=True,
        format=FORMAT,
    )

    for filename, log_type in CATEGORY_LOGS.items():
        logger.add(
            os.path.join(log_dir, filename),
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            level=settings.LOG_LEVEL,
            enqueue=True,
            filter=_only(log_type),
            format=FORMAT,
        )

    logger.add(
        os.path.join(log_dir, "errors.log"),
        rotation=settings.LOG_ROTATION,
        retention=settings.ERROR_LOG_RETENTION,
        level="ERROR",
        enqueue=True,
    )


configure_logging()


def get_logger():
    return logger
