# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import threading
import unittest
from pathlib import Path

from pricetrend.config.logging_config import QUIET_LOGGERS, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Detach handlers from the pricetrend logger before each test."""
        self.project_logger = logging.getLogger("pricetrend")
        self._clear_handlers()

    def tearDown(self) -> None:
        self._clear_handlers()

    def _clear_handlers(self) -> None:
        for handler in list(self.project_logger.handlers):
            handler.close()
            self.project_logger.removeHandler(handler)

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")

    def test_file_handler_level_debug(self) -> None:
        setup_logging()
        file_handlers = [
            h
            for h in self.project_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        setup_logging()
        stream_handlers = [
            h
            for h in self.project_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        setup_logging()
        count_before = len(self.project_logger.handlers)
        setup_logging()
        self.assertEqual(len(self.project_logger.handlers), count_before)

    def test_child_loggers_reach_file(self) -> None:
        """Module loggers propagate into the run log."""
        log_path = setup_logging()
        logging.getLogger("pricetrend.fetcher").info("hello from fetcher")
        for handler in self.project_logger.handlers:
            handler.flush()
        self.assertIn(
            "hello from fetcher", log_path.read_text(encoding="utf-8")
        )

    def test_transport_loggers_quietened(self) -> None:
        setup_logging()
        for name in QUIET_LOGGERS:
            self.assertEqual(
                logging.getLogger(name).level, logging.WARNING
            )

    def test_records_carry_thread_name(self) -> None:
        """Worker-thread records are attributable in the run log."""
        log_path = setup_logging()

        def log_from_worker() -> None:
            logging.getLogger("pricetrend.fetcher").warning("from worker")

        worker = threading.Thread(target=log_from_worker, name="cs-worker")
        worker.start()
        worker.join()
        for handler in self.project_logger.handlers:
            handler.flush()
        line = next(
            ln
            for ln in log_path.read_text(encoding="utf-8").splitlines()
            if "from worker" in ln
        )
        self.assertIn("| cs-worker |", line)

    def test_explicit_logs_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "custom"
            log_path = setup_logging(target)
            self.assertEqual(log_path.parent, target)
            self.assertTrue(log_path.exists())
            self._clear_handlers()


if __name__ == "__main__":
    unittest.main()
