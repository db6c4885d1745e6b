"""Shared fixtures for the BAI2 test suite.

``sample.bai`` is a complete single-group, single-account file that exercises
summary items, continuation records on both an account identifier and a
transaction detail, and balanced trailers.
"""
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"

MINIMAL_FILE = (
    "01,SENDER,RECEIVER,240101,0800,FILE1,,,2/\n"
    "02,RECEIVER,SENDER,1,240101,,USD,/\n"
    "03,12345,USD,010,1000,,/\n"
    "49,1000,2/\n"
    "98,1000,1,4/\n"
    "99,1000,1,6/\n"
)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin environment-driven defaults so a developer's BAI2_* variables don't leak in."""
    from bai2_core.config import config_loader
    from common import settings

    monkeypatch.setattr(settings, "CHECK_INTEGRITY", True)
    monkeypatch.setattr(settings, "STRICT", False)
    monkeypatch.setattr(settings, "READ_CHUNK_SIZE", 4096)
    monkeypatch.setattr(settings, "ENCODING", "utf-8")
    monkeypatch.setattr(config_loader, "IGNORED_SUMMARY_CODES", frozenset())


@pytest.fixture
def sample_path() -> Path:
    return DATA_DIR / "sample.bai"


@pytest.fixture
def sample_text(sample_path: Path) -> str:
    return sample_path.read_text()


@pytest.fixture
def minimal_text() -> str:
    return MINIMAL_FILE
