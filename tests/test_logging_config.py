import pytest
from loguru import logger

from etymograph.utils import setup_logging


def test_rejects_unknown_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        setup_logging(console_level="LOUD")


def test_rejects_unknown_file_level(tmp_path):
    with pytest.raises(ValueError):
        setup_logging(log_path=str(tmp_path / "etymograph.log"), console_level="INFO", file_level="chatty")


def test_file_handler_writes_log(tmp_path):
    log_path = tmp_path / "logs" / "etymograph.log"
    setup_logging(log_path=str(log_path), console_level="warning", file_level="debug")

    logger.debug("lookup started")
    logger.complete()

    assert log_path.exists()
    assert "lookup started" in log_path.read_text(encoding="utf-8")
