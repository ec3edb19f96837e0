"""Dashboard application state, key dispatch and the foreground loop.

All state mutation and all drawing happen here, on the calling thread.
The only other thread is the EventProducer, which talks to this module
through the EventChannel alone.
"""
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TextIO

import render
from board import CursorSet
from events import DEFAULT_TICK_RATE, Event, EventChannel, EventProducer, InputFailure, KeySource, Tick
from menu import QUIT_KEY, Screen, screen_for_key
from models import Task
from storage import Storage, StoreError
from view import Layout, build_layout, project

logger = logging.getLogger(__name__)

# key name -> navigation action on the Todos screen
NAVIGATION: Dict[str, str] = {
    'j': 'down', 'down': 'down',
    'k': 'up', 'up': 'up',
    'l': 'right', 'right': 'right',
    'h': 'left', 'left': 'left',
}


@dataclass
class AppState:
    """Everything the dashboard remembers between events."""
    screen: Screen = Screen.HOME
    cursors: CursorSet = field(default_factory=CursorSet)
    keep_going: bool = False
    banner: Optional[str] = None
    last_good: Optional[Dict[str, List[Task]]] = None
    running: bool = True


def _store_failed(state: AppState, exc: StoreError) -> None:
    """Record a store failure, or re-raise it when it cannot be tolerated."""
    if not state.keep_going or state.last_good is None:
        raise exc
    message = str(exc)
    if state.banner != message:
        logger.warning("store read failed, showing last good board: %s", message)
    state.banner = message


def column_count(state: AppState, store: Storage, column: str) -> int:
    try:
        return len(store.list_by_status(column))
    except StoreError as exc:
        _store_failed(state, exc)
        return len(state.last_good[column])


def dispatch(state: AppState, event: Event, store: Storage) -> bool:
    """Apply one event to `state`. Returns False once the loop should stop."""
    if isinstance(event, InputFailure):
        raise event.error
    if isinstance(event, Tick):
        return True
    key = event.name
    if key == QUIT_KEY:
        logger.info("quit requested")
        state.running = False
        return False
    screen = screen_for_key(key)
    if screen is not None:
        state.screen = screen
        return True
    action = NAVIGATION.get(key)
    if action is None or state.screen is not Screen.TODOS:
        return True

    cursors = state.cursors
    if action == 'down':
        cursors.advance(cursors.focus, column_count(state, store, cursors.focus))
    elif action == 'up':
        cursors.retreat(cursors.focus, column_count(state, store, cursors.focus))
    else:
        target = cursors.neighbour(1 if action == 'right' else -1)
        if target is not None:
            cursors.focus_column(target, column_count(state, store, target))
    logger.debug("key %r -> focus=%s cursors=%s", key, cursors.focus, cursors.indexes())
    return True


def refresh(state: AppState, store: Storage) -> Layout:
    """Project the current frame, falling back to the last good board if allowed."""
    try:
        layout = project(state, store)
    except StoreError as exc:
        _store_failed(state, exc)
        state.cursors.clamp({s: len(tasks) for s, tasks in state.last_good.items()})
        return build_layout(state, state.last_good, state.banner)
    if layout.snapshot is not None:
        columns = layout.snapshot.columns
        state.cursors.clamp({s: len(tasks) for s, tasks in columns.items()})
        state.last_good = columns
        if state.banner is not None:
            logger.info("store readable again")
        state.banner = layout.banner = None
    return layout


class App:
    def __init__(self, store: Storage, source: KeySource, out: TextIO = sys.stdout,
                 tick_rate: float = DEFAULT_TICK_RATE, keep_going: bool = False,
                 draw: Callable[[Layout, TextIO], None] = render.draw):
        self.store = store
        self.source = source
        self.out = out
        self.tick_rate = tick_rate
        self.keep_going = keep_going
        self.draw = draw
        self.channel = EventChannel()

    def run(self, state: Optional[AppState] = None) -> int:
        """Run until quit; returns the process exit code.

        The store is read once up front so a missing or broken file stops
        the dashboard before it starts drawing.
        """
        if state is None:
            state = AppState(keep_going=self.keep_going)
        state.last_good = self.store.snapshot()
        producer = EventProducer(self.source, self.channel, self.tick_rate)
        producer.start()
        try:
            self.loop(state)
        finally:
            producer.stop()
        return 0

    def loop(self, state: AppState) -> None:
        while state.running:
            self.draw(refresh(state, self.store), self.out)
            if not dispatch(state, self.channel.get(), self.store):
                break
