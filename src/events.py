"""Event stream feeding the dashboard loop.

One background thread polls the key source with a bounded timeout and emits
ticks at a fixed rate; both land in one ordered channel read by the
foreground loop only.

Decisions:
- At most one Tick waits in the channel. If the consumer falls behind,
  further ticks are dropped instead of piling up; key events are never
  dropped.
- Input failures travel through the channel as InputFailure so they are
  raised on the foreground thread, which owns the terminal.
"""
from __future__ import annotations
import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 0.2


class InputSurfaceError(Exception):
    """The terminal or keyboard subsystem failed."""


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Key:
    name: str


@dataclass(frozen=True)
class InputFailure:
    error: InputSurfaceError


Event = Union[Tick, Key, InputFailure]
TICK = Tick()


class KeySource(Protocol):
    def read_key(self, timeout: float) -> Optional[str]:
        """Wait up to `timeout` seconds for one key; None when nothing arrived."""
        ...


class EventChannel:
    """Unbounded FIFO of events with tick coalescing."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Event]" = queue.Queue()
        self._tick_pending = threading.Event()

    def put_key(self, name: str) -> None:
        self._queue.put(Key(name))

    def put_tick(self) -> bool:
        """Queue a tick unless one is already waiting. Returns True if queued."""
        if self._tick_pending.is_set():
            return False
        self._tick_pending.set()
        self._queue.put(TICK)
        return True

    def put_failure(self, error: InputSurfaceError) -> None:
        self._queue.put(InputFailure(error))

    def get(self, timeout: Optional[float] = None) -> Event:
        """Block until the next event (queue.Empty after `timeout`, if given)."""
        event = self._queue.get(timeout=timeout)
        if isinstance(event, Tick):
            self._tick_pending.clear()
        return event

    def pending(self) -> int:
        return self._queue.qsize()


class EventProducer:
    """Background thread turning a key source and a clock into events."""

    def __init__(self, source: KeySource, channel: EventChannel,
                 tick_rate: float = DEFAULT_TICK_RATE,
                 clock: Callable[[], float] = time.monotonic):
        if tick_rate <= 0:
            raise ValueError(f"tick_rate must be positive, got {tick_rate}")
        self.source = source
        self.channel = channel
        self.tick_rate = tick_rate
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name='event-producer', daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout if timeout is not None else self.tick_rate + 1.0)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        last_tick = self._clock()
        while not self._stop.is_set():
            timeout = max(0.0, self.tick_rate - (self._clock() - last_tick))
            try:
                key = self.source.read_key(timeout)
            except InputSurfaceError as exc:
                logger.error("input source failed: %s", exc)
                self.channel.put_failure(exc)
                return
            if key is not None and not self._stop.is_set():
                self.channel.put_key(key)
            if self._clock() - last_tick >= self.tick_rate:
                # however long the wait was, it is worth one tick only
                if not self.channel.put_tick():
                    logger.debug("tick dropped, consumer behind")
                last_tick = self._clock()
