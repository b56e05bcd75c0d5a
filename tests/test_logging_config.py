"""Tests for logging configuration."""

import logging

from seogeo.logging_config import setup_logging


class TestSetupLogging:
    """Test cases for setup_logging."""

    def teardown_method(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()

    def test_level_and_quiet_loggers(self):
        setup_logging(level="debug")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_log_file_created(self, tmp_path):
        log_file = tmp_path / "logs" / "seogeo.log"

        setup_logging(level="INFO", log_file=str(log_file))
        logging.getLogger("seogeo.test").info("analysis finished")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "analysis finished" in log_file.read_text()
