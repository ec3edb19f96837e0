"""Persistence helpers for the task store.

The backing file is a JSON list of task records. Every query re-reads the
file; nothing is cached between calls, so edits made by hand while the
dashboard is open show up on the next tick.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Union

from models import STATUSES, Task

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class StoreError(Exception):
    """Base class for task store failures."""

    def __init__(self, path: PathLike, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class StoreUnavailable(StoreError):
    """The backing file could not be read."""


class StoreCorrupt(StoreError):
    """The backing file was read but does not hold a valid task list."""


class Storage:
    def __init__(self, path: PathLike):
        self.path = Path(path)

    def load_tasks(self) -> List[Task]:
        """Load every task from disk in file order.

        Raises StoreUnavailable if the file cannot be read and StoreCorrupt
        if its contents are not a list of valid, uniquely numbered tasks.
        """
        try:
            content = self.path.read_text(encoding='utf-8')
        except OSError as exc:
            raise StoreUnavailable(self.path, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise StoreCorrupt(self.path, f"not UTF-8 text ({exc.reason})") from exc
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise StoreCorrupt(self.path, f"invalid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise StoreCorrupt(self.path, f"expected a list of tasks, got {type(data).__name__}")
        tasks: List[Task] = []
        seen: set = set()
        for position, raw in enumerate(data):
            if not isinstance(raw, dict):
                raise StoreCorrupt(self.path, f"entry {position} is not an object")
            try:
                task = Task.from_dict(raw)
            except ValueError as exc:
                raise StoreCorrupt(self.path, f"entry {position}: {exc}") from exc
            if task.id in seen:
                raise StoreCorrupt(self.path, f"duplicate task id {task.id}")
            seen.add(task.id)
            tasks.append(task)
        logger.debug("loaded %d task(s) from %s", len(tasks), self.path)
        return tasks

    def list_by_status(self, status: str) -> List[Task]:
        """Tasks whose status equals `status`, in file order (fresh list per call)."""
        if status not in STATUSES:
            raise ValueError(f"Invalid status: {status}")
        return [task for task in self.load_tasks() if task.status == status]

    def snapshot(self) -> Dict[str, List[Task]]:
        """All three columns from a single read, keyed by status."""
        columns: Dict[str, List[Task]] = {status: [] for status in STATUSES}
        for task in self.load_tasks():
            columns[task.status].append(task)
        return columns

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        """Persist tasks to disk (pretty-printed)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([task.to_dict() for task in tasks], f, indent=4)
        logger.info("wrote %s", self.path)
