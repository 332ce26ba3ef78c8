"""Shared test fixtures for the label processor test suite."""

from pathlib import Path

import pytest

from src.utils.config import AppConfig

LABEL_TEXT = """USPS PRIORITY MAIL
SHIP TO: JANE DOE
123 MAIN ST
SPRINGFIELD IL 62701

USPS TRACKING # EP
9205 5000 1234 5678 9012 34

Order #EJR104233–1
Qty 2
"""


@pytest.fixture
def label_text() -> str:
    """OCR text of a typical label, with an en dash in the order number."""
    return LABEL_TEXT


@pytest.fixture
def app_config() -> AppConfig:
    """Default configuration without a process log file."""
    return AppConfig(log_dir=None)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
