"""Projection of application state onto a renderable layout.

project() only reads: it queries the store and the state but changes
neither. The result describes what to draw; render.py decides how.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Sequence, Tuple

from board import BoardSnapshot
from menu import MENU_TITLES, Label, Screen, hotkey_labels
from models import DOING, DONE, STATUSES, TODO, Task
from storage import Storage

if TYPE_CHECKING:  # pragma: no cover
    from app import AppState

APP_TITLE = "Personal Work Suite"
FOOTER = f"{APP_TITLE} CLI - all rights reserved"
COLUMN_TITLES: Dict[str, str] = {TODO: "ToDo", DOING: "Doing", DONE: "Done"}
DETAIL_HEADERS: Tuple[str, ...] = ("ID", "Title", "Description", "Category", "Created At")
NO_SELECTION = "(no task selected)"

HOME_LINES: Tuple[str, ...] = (
    "",
    "Welcome",
    "",
    "to",
    "",
    APP_TITLE,
    "",
    "Press 't' to access To-Do, 'i' to access timers and 'm' to check time tracking.",
)
PLACEHOLDERS: Dict[Screen, Tuple[str, ...]] = {
    Screen.TIMERS: ("", "Timers", "", "Nothing here yet."),
    Screen.TIME_TRACKING: ("", "Time Tracking", "", "Nothing here yet."),
}


@dataclass
class TabBar:
    labels: List[Label]
    active: int


@dataclass
class ColumnView:
    title: str
    items: List[str]
    highlighted: Optional[int] = None
    focused: bool = False


@dataclass
class DetailView:
    headers: Tuple[str, ...] = DETAIL_HEADERS
    row: Optional[Tuple[str, ...]] = None


@dataclass
class Layout:
    tabs: TabBar
    screen: Screen
    title: str
    lines: List[str] = field(default_factory=list)
    columns: List[ColumnView] = field(default_factory=list)
    detail: Optional[DetailView] = None
    footer: str = FOOTER
    banner: Optional[str] = None
    snapshot: Optional[BoardSnapshot] = None


def detail_row(task: Task) -> Tuple[str, ...]:
    return (
        str(task.id),
        task.title,
        task.description,
        task.category,
        task.created_at.strftime('%Y-%m-%d %H:%M'),
    )


def build_layout(state: "AppState", columns: Optional[Mapping[str, Sequence[Task]]] = None,
                 banner: Optional[str] = None,
                 titles: Sequence[str] = MENU_TITLES) -> Layout:
    """Layout for `state` given already loaded columns (needed on the Todos screen)."""
    screen = state.screen
    layout = Layout(
        tabs=TabBar(labels=hotkey_labels(titles), active=screen.tab_index),
        screen=screen,
        title=titles[screen.tab_index],
        banner=banner,
    )
    if screen is Screen.HOME:
        layout.lines = list(HOME_LINES)
        return layout
    if screen is not Screen.TODOS:
        layout.lines = list(PLACEHOLDERS[screen])
        return layout

    snapshot = BoardSnapshot.build(columns or {}, state.cursors)
    for status in STATUSES:
        focused = status == snapshot.focus
        layout.columns.append(ColumnView(
            title=COLUMN_TITLES[status],
            items=[task.title for task in snapshot.columns[status]],
            highlighted=snapshot.highlighted if focused else None,
            focused=focused,
        ))
    layout.detail = DetailView(row=detail_row(snapshot.selected) if snapshot.selected else None)
    layout.snapshot = snapshot
    return layout


def project(state: "AppState", store: Storage, titles: Sequence[str] = MENU_TITLES) -> Layout:
    """Layout for the current state; reads the store on the Todos screen only.

    The store banner belongs to the board and is not shown on other screens.
    Store errors propagate to the caller.
    """
    if state.screen is not Screen.TODOS:
        return build_layout(state, None, None, titles)
    return build_layout(state, store.snapshot(), state.banner, titles)
