import pytest

from bookandplay.core.config import settings
from bookandplay.core.logging_config import configure_logging, get_logger


@pytest.fixture
def log_dir(tmp_path):
    configure_logging(str(tmp_path))
    yield tmp_path
    configure_logging(settings.LOG_DIR)


def read(log_dir, name):
    get_logger().complete()
    path = log_dir / name
    return path.read_text() if path.exists() else ""


def test_category_logs_only_get_their_own_lines(log_dir):
    logger = get_logger()
    logger.bind(log_type="booking").info("Booking created | id=7")
    logger.bind(log_type="slots").info("Grid generated | venue=3")

    assert "Booking created | id=7" in read(log_dir, "bookings.log")
    assert "Booking created" not in read(log_dir, "slots.log")
    assert "Grid generated | venue=3" in read(log_dir, "slots.log")
    assert "Booking created | id=7" in read(log_dir, "app.log")


def test_level_comes_from_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "WARNING")
    configure_logging(str(tmp_path))
    try:
        logger = get_logger()
        logger.info("routine request")
        logger.warning("slow query")
        logger.error("database down")
        logger.complete()

        app_log = (tmp_path / "app.log").read_text()
        assert "routine request" not in app_log
        assert "slow query" in app_log
        assert "database down" in (tmp_path / "errors.log").read_text()
    finally:
        monkeypatch.undo()
        configure_logging(settings.LOG_DIR)
