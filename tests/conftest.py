"""Shared fixtures: task records and store files."""

import json
import threading
import time
from pathlib import Path
from typing import Callable, List

import pytest

from events import InputSurfaceError
from storage import Storage


class ScriptedKeys:
    """Key source replaying a fixed list of keys, then idling."""

    def __init__(self, keys):
        self.keys = list(keys)
        self.lock = threading.Lock()

    def read_key(self, timeout):
        with self.lock:
            if self.keys:
                return self.keys.pop(0)
        time.sleep(timeout)
        return None


class BrokenKeys:
    def read_key(self, timeout):
        raise InputSurfaceError("stdin closed")


def record(tid: int, status: str = "Todo", title: str = "", **extra) -> dict:
    data = {
        "id": tid,
        "title": title or f"task {tid}",
        "description": f"description {tid}",
        "category": "general",
        "status": status,
        "created_at": "2024-05-01T09:30:00Z",
    }
    data.update(extra)
    return data


@pytest.fixture
def write_store(tmp_path: Path) -> Callable[[List[dict]], Storage]:
    """Write records to a JSON file and return a Storage over it."""
    path = tmp_path / "data" / "db.json"

    def _write(records: List[dict]) -> Storage:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(records))
        return Storage(path)

    return _write


@pytest.fixture
def scenario_store(write_store) -> Storage:
    return write_store([record(1), record(2), record(3, "Doing")])
