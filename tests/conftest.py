# tests/conftest.py

"""Shared pytest fixtures for all pricetrend tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from pricetrend.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Point Settings.LOGS_DIR at a temp dir so tests never write logs/."""
    logs_dir = tmp_path / "logs"
    with patch.object(Settings, "LOGS_DIR", logs_dir):
        yield logs_dir


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Patch time.sleep globally so blocking fallbacks run instantly."""
    with patch("time.sleep"):
        yield
