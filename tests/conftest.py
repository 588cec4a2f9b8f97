"""Shared fixtures for tests."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

# Keep log output out of the working directory before any module sets up its logger
_test_log_dir = tempfile.mkdtemp()
os.environ["OVERWORK_LOG"] = os.path.join(_test_log_dir, "test_overwork.log")

TZ = timezone(timedelta(hours=2))


@pytest.fixture
def temp_storage(tmp_path, monkeypatch):
    """Point storage at a data file in a temporary directory."""
    data_path = tmp_path / "overwork_data.json"
    monkeypatch.setenv("OVERWORK_DATA", str(data_path))

    import importlib
    import storage
    importlib.reload(storage)

    yield storage


@pytest.fixture
def day1() -> datetime:
    return datetime(2026, 1, 27, 18, 30, tzinfo=TZ)


@pytest.fixture
def day2() -> datetime:
    return datetime(2026, 1, 28, 17, 45, tzinfo=TZ)


@pytest.fixture
def sample_store(day1, day2):
    """Create a Store with two days of history."""
    from models import HistoryRecord, Store

    return Store(
        need_work=timedelta(hours=8),
        overwork=timedelta(hours=8, minutes=15),
        history=[
            HistoryRecord(
                date=day1,
                worked=timedelta(hours=9, minutes=15),
                need_work=timedelta(),
                overwork=timedelta(hours=9, minutes=15),
            ),
            HistoryRecord(
                date=day2,
                worked=timedelta(hours=7),
                need_work=timedelta(hours=8),
                overwork=timedelta(hours=-1),
            ),
        ],
    )
