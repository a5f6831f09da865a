# pricetrend/config/logging_config.py

"""Run logging for pricetrend scans.

``setup_logging`` gives each launch its own ``logs/run_<timestamp>.log``
holding every ``pricetrend.*`` record: fetch strategies tried per URL,
skipped documents, suggester and model fallbacks. Only warnings reach
stderr so JSON on stdout stays clean.

Cloudscraper runs inside worker threads, so file records carry the
thread name. Its ``urllib3`` chatter is capped at WARNING.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from pricetrend.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)

_STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Transport libraries that log every connection at DEBUG
QUIET_LOGGERS: tuple[str, ...] = ("urllib3", "charset_normalizer", "asyncio")


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Route ``pricetrend`` logging to a per-run file and stderr.

    Args:
        logs_dir: Directory for the run log. Defaults to
            :attr:`Settings.LOGS_DIR`.

    Returns:
        The path of this run's log file.
    """
    run_dir = logs_dir or Settings.LOGS_DIR
    run_dir.mkdir(parents=True, exist_ok=True)
    log_file = run_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger = logging.getLogger("pricetrend")
    app_logger.setLevel(logging.DEBUG)
    if app_logger.handlers:
        return log_file

    run_handler = logging.FileHandler(log_file, encoding="utf-8")
    run_handler.setLevel(logging.DEBUG)
    run_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))

    app_logger.addHandler(run_handler)
    app_logger.addHandler(stderr_handler)
    app_logger.debug("Run log opened at %s", log_file)
    return log_file
