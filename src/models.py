"""Data models for the Personal Work Suite dashboard.

Status tokens are stored exactly as "Todo", "Doing" and "Done" so the
JSON file stays readable by hand. Column order on the board follows
STATUSES.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Mapping, Tuple

TODO = "Todo"
DOING = "Doing"
DONE = "Done"
STATUSES: Tuple[str, ...] = (TODO, DOING, DONE)

REQUIRED_FIELDS: Tuple[str, ...] = ("id", "title", "description", "category", "status", "created_at")


@dataclass(frozen=True)
class Task:
    """A single unit of work as persisted in the backing file.

    Fields:
        id: Unique integer id, assigned once.
        title: Short, single-line title shown in the column lists.
        description: Free text, shown in the detail table only.
        category: Free text label.
        status: One of STATUSES.
        created_at: Creation timestamp (timezone aware when the file says so).
    """
    id: int
    title: str
    description: str
    category: str
    status: str
    created_at: datetime

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from one decoded JSON record.

        Raises ValueError describing the first problem found.
        """
        missing = [name for name in REQUIRED_FIELDS if name not in raw]
        if missing:
            raise ValueError(f"missing field(s): {', '.join(missing)}")
        tid = raw["id"]
        # bool is an int subclass; true/false are not ids
        if not isinstance(tid, int) or isinstance(tid, bool):
            raise ValueError(f"id must be an integer, got {tid!r}")
        for name in ("title", "description", "category"):
            if not isinstance(raw[name], str):
                raise ValueError(f"{name} of task {tid} must be text")
        status = raw["status"]
        if status not in STATUSES:
            raise ValueError(f"unknown status {status!r} on task {tid}")
        return cls(
            id=tid,
            title=raw["title"],
            description=raw["description"],
            category=raw["category"],
            status=status,
            created_at=parse_timestamp(raw["created_at"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        return data


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing 'Z' means UTC."""
    if not isinstance(value, str):
        raise ValueError(f"created_at must be text, got {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_timestamp(value: datetime) -> str:
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text
