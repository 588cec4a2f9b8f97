from __future__ import annotations

import json
import os
import re
from datetime import datetime, timedelta
from pathlib import Path

from logging_handler import setup_logger
from models import HistoryRecord, Store

logger = setup_logger(__name__)

_NS_PER_MICROSECOND = 1000
_FRACTION_RE = re.compile(r"\.(\d+)")


class StorageError(Exception):
    """Base class for data file failures."""


class DataFileError(StorageError):
    """The data file could not be created, read, or written."""


class CorruptDataError(StorageError):
    """The data file exists but its content can't be parsed."""


def _get_data_path() -> Path:
    """Get data file path from environment variable or default location."""
    if env_path := os.environ.get("OVERWORK_DATA"):
        return Path(env_path)
    return Path(".overwork_data.json")


DATA_PATH = _get_data_path()


def _temp_path() -> Path:
    return DATA_PATH.with_name("_temp_" + DATA_PATH.name)


# Durations are stored as integer nanoseconds

def _to_ns(value: timedelta) -> int:
    return (value // timedelta(microseconds=1)) * _NS_PER_MICROSECOND


def _from_ns(value: int) -> timedelta:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"duration must be an integer, got {value!r}")
    return timedelta(microseconds=value // _NS_PER_MICROSECOND)


def _parse_timestamp(val: str) -> datetime:
    """Parse an ISO-8601 timestamp, allowing a Z suffix and nanoseconds.

    Fractions of any length are padded or truncated to microseconds, since
    trailing zeros are dropped by the writer.
    """
    val = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], val, count=1)
    if val.endswith("Z"):
        val = val[:-1] + "+00:00"
    return datetime.fromisoformat(val)


def _record_to_dict(record: HistoryRecord) -> dict:
    return {
        "date": record.date.isoformat(),
        "worked": _to_ns(record.worked),
        "need_work": _to_ns(record.need_work),
        "overwork": _to_ns(record.overwork),
    }


def _dict_to_record(row: dict) -> HistoryRecord:
    return HistoryRecord(
        date=_parse_timestamp(row["date"]),
        worked=_from_ns(row["worked"]),
        need_work=_from_ns(row["need_work"]),
        overwork=_from_ns(row["overwork"]),
    )


def store_to_dict(store: Store) -> dict:
    return {
        "need_work": _to_ns(store.need_work),
        "overwork": _to_ns(store.overwork),
        "history": [_record_to_dict(r) for r in store.history],
    }


def dict_to_store(data: dict) -> Store:
    return Store(
        need_work=_from_ns(data["need_work"]),
        overwork=_from_ns(data["overwork"]),
        history=[_dict_to_record(row) for row in data["history"] or []],
    )


def ensure_store_file():
    """Create the data file with an empty store if it doesn't exist.

    A save interrupted after the old file was removed leaves only the
    complete temp file, which is adopted instead of starting empty.
    """
    temp_path = _temp_path()
    try:
        if DATA_PATH.exists():
            return
        if temp_path.exists():
            temp_path.rename(DATA_PATH)
            logger.warning("Recovered data file %s from %s", DATA_PATH, temp_path)
            return
        content = json.dumps(store_to_dict(Store()), indent="\t")
        DATA_PATH.write_text(content)
    except OSError as exc:
        logger.error("Could not create data file %s: %s", DATA_PATH, exc)
        raise DataFileError(f"Could not create data file '{DATA_PATH}': {exc}") from exc
    logger.info("Created data file %s", DATA_PATH)


def load_store() -> Store:
    """Load the store from the data file."""
    try:
        content = DATA_PATH.read_text()
    except OSError as exc:
        logger.error("Could not read data file %s: %s", DATA_PATH, exc)
        raise DataFileError(f"Could not read data file '{DATA_PATH}': {exc}") from exc

    try:
        store = dict_to_store(json.loads(content))
    except (ValueError, KeyError, TypeError) as exc:
        logger.error("Data content is invalid at %s: %s", DATA_PATH, exc)
        raise CorruptDataError(f"Data content is invalid at '{DATA_PATH}': {exc}") from exc

    logger.debug("Loaded %d history records from %s", len(store.history), DATA_PATH)
    return store


def save_store(store: Store):
    """Save the store atomically.

    The full content goes to a temp sibling first, then the old file is
    removed and the temp file renamed into place. An interrupted save leaves
    either the old file or the complete temp file on disk.
    """
    content = json.dumps(store_to_dict(store), indent=2)
    temp_path = _temp_path()
    try:
        temp_path.write_text(content)
        DATA_PATH.unlink(missing_ok=True)
        temp_path.rename(DATA_PATH)
    except OSError as exc:
        logger.error("Could not save data file %s: %s", DATA_PATH, exc)
        raise DataFileError(f"Could not save data file '{DATA_PATH}': {exc}") from exc
    logger.debug("Saved %d history records to %s", len(store.history), DATA_PATH)


def startup() -> Store:
    """Create the data file if needed and load it."""
    ensure_store_file()
    return load_store()


def shutdown(store: Store):
    """Final save on exit."""
    save_store(store)
    logger.info("Saved data on shutdown")
