"""Board navigation state: per-column cursors, focus and the derived snapshot.

Decisions:
- Exactly one column is focused. Only the focused column holds a selection;
  moving focus clears the column being left.
- A stored index is never trusted blindly: it is clamped against the list it
  is resolved with, and every frame writes the clamped value back, so a
  column that shrank stays on its last item (or becomes unselected when it
  empties) even after it grows again.
- Advancing an unselected, non-empty column selects its first item.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from models import STATUSES, TODO, Task


class ColumnCursor:
    """Selection state of one column: None (unselected) or an index."""

    def __init__(self, index: Optional[int] = None):
        self.index: Optional[int] = index

    @property
    def selected(self) -> bool:
        return self.index is not None

    def resolve(self, count: int) -> Optional[int]:
        """Index valid for a list of `count` items, or None."""
        if self.index is None or count <= 0:
            return None
        return min(max(self.index, 0), count - 1)

    def clamp(self, count: int) -> None:
        self.index = self.resolve(count)

    def advance(self, count: int) -> None:
        if count <= 0:
            self.index = None
            return
        current = self.resolve(count)
        self.index = 0 if current is None else (current + 1) % count

    def retreat(self, count: int) -> None:
        if count <= 0:
            self.index = None
            return
        current = self.resolve(count)
        self.index = 0 if current is None else (current - 1 + count) % count

    def select_first(self, count: int) -> None:
        self.index = 0 if count > 0 else None

    def clear(self) -> None:
        self.index = None

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"ColumnCursor(index={self.index})"


class CursorSet:
    """The three column cursors plus which column is focused."""

    def __init__(self, focus: str = TODO):
        if focus not in STATUSES:
            raise ValueError(f"Invalid column: {focus}")
        self.cursors: Dict[str, ColumnCursor] = {s: ColumnCursor() for s in STATUSES}
        self.focus: str = focus
        # the focused column starts on its first item; resolve() drops it if empty
        self.cursors[focus].index = 0

    def __getitem__(self, column: str) -> ColumnCursor:
        return self.cursors[column]

    def indexes(self) -> Dict[str, Optional[int]]:
        return {s: c.index for s, c in self.cursors.items()}

    # -------------------- movement within a column --------------------
    def advance(self, column: str, count: int) -> None:
        self.cursors[column].advance(count)

    def retreat(self, column: str, count: int) -> None:
        self.cursors[column].retreat(count)

    # -------------------- focus --------------------
    def focus_next_column(self, from_column: str, to_column: str, count: int) -> None:
        """Clear `from_column` and focus `to_column`, which holds `count` tasks."""
        if from_column != to_column:
            self.cursors[from_column].clear()
        self.cursors[to_column].select_first(count)
        self.focus = to_column

    def focus_column(self, to_column: str, count: int) -> None:
        self.focus_next_column(self.focus, to_column, count)

    def neighbour(self, step: int) -> Optional[str]:
        """Column `step` places right (positive) or left of focus, None past the edge."""
        pos = STATUSES.index(self.focus) + step
        if 0 <= pos < len(STATUSES):
            return STATUSES[pos]
        return None

    # -------------------- resolution --------------------
    def clamp(self, counts: Mapping[str, int]) -> None:
        """Pull every stored index back inside its column, given the column sizes."""
        for column, count in counts.items():
            self.cursors[column].clamp(count)

    def selected_index(self, column: str, count: int) -> Optional[int]:
        return self.cursors[column].resolve(count)

    def selected_task(self, column: str, tasks: Sequence[Task]) -> Optional[Task]:
        """Task under the cursor of `column`, or None. Never raises."""
        idx = self.cursors[column].resolve(len(tasks))
        if idx is None:
            return None
        task = tasks[idx]
        if task.status != column:
            return None
        return task


@dataclass
class BoardSnapshot:
    """Columns of one render cycle plus the task under the focused cursor."""
    columns: Dict[str, List[Task]] = field(default_factory=lambda: {s: [] for s in STATUSES})
    focus: str = TODO
    highlighted: Optional[int] = None
    selected: Optional[Task] = None

    @classmethod
    def build(cls, columns: Mapping[str, Sequence[Task]], cursors: CursorSet) -> "BoardSnapshot":
        lists = {s: list(columns.get(s, ())) for s in STATUSES}
        focus = cursors.focus
        return cls(
            columns=lists,
            focus=focus,
            highlighted=cursors.selected_index(focus, len(lists[focus])),
            selected=cursors.selected_task(focus, lists[focus]),
        )

    def __str__(self) -> str:
        return ', '.join(f'{s}: {len(self.columns[s])} tasks' for s in STATUSES)
