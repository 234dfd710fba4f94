"""Background input poller feeding a bounded event queue."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Union

from .keys import KeyPress
from .models import EventSourceError, RequestRecord, RunOutcome

TICK_RATE = 0.25
QUEUE_SIZE = 64

# Blocks for at most ``timeout`` seconds; returns None when nothing was typed.
KeyReader = Callable[[float], Union[str, int, None]]


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class RunCompleted:
    record: RequestRecord
    seq: int
    outcome: RunOutcome


@dataclass(frozen=True)
class SourceFailure:
    error: BaseException


Event = Union[KeyPress, Tick, RunCompleted]


class EventSource:
    def __init__(
        self,
        read_key: KeyReader,
        tick_rate: float = TICK_RATE,
        maxsize: int = QUEUE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.tick_rate = tick_rate
        self.events: queue.Queue[Event | SourceFailure] = queue.Queue(maxsize=maxsize)
        self._read_key = read_key
        self._clock = clock
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._poll, name="reqdeck-events", daemon=True)

    def start(self) -> "EventSource":
        self._thread.start()
        return self

    def stop(self, timeout: float = 1.0) -> None:
        self._stop.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()

    def next(self) -> Event:
        item = self.events.get()
        if isinstance(item, SourceFailure):
            raise EventSourceError(f"terminal read failed: {item.error}") from item.error
        return item

    def post(self, event: Event) -> None:
        """Queue an event from another thread; blocks while the queue is full."""
        self._put(event)

    def _put(self, item: Event | SourceFailure) -> bool:
        while not self._stop.is_set():
            try:
                self.events.put(item, timeout=self.tick_rate)
                return True
            except queue.Full:
                continue
        return False

    def _poll(self) -> None:
        last_tick = self._clock()
        while not self._stop.is_set():
            timeout = max(0.0, self.tick_rate - (self._clock() - last_tick))
            try:
                raw = self._read_key(timeout)
            except Exception as exc:
                self._put(SourceFailure(exc))
                return
            if raw is not None:
                self._put(KeyPress.from_raw(raw))
            if self._clock() - last_tick >= self.tick_rate:
                self._put(Tick())
                last_tick = self._clock()
