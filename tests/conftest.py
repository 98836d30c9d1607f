"""Shared pytest configuration for SheetDDL tests."""
import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

# Keep test log files out of the working tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="sheetddl-logs-"))

from SheetDDL.services.data_source import Dataset  # noqa: E402
from SheetDDL.etl.db import dispose_engines  # noqa: E402


@pytest.fixture
def people_dataset():
    """Two-column dataset used by the end-to-end examples."""
    return Dataset(
        headers=["Name", "Age"],
        rows=[["Alice", "30"], ["Bob", "41"]],
    )


@pytest.fixture(autouse=True)
def _dispose_engines():
    yield
    dispose_engines()
