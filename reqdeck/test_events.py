from __future__ import annotations

import queue
import threading
import time
import unittest

from reqdeck.events import EventSource, RunCompleted, Tick
from reqdeck.keys import KeyPress
from reqdeck.models import EventSourceError, RequestRecord, RunResult


class ScriptedKeys:
    """Key reader that replays ``keys`` then idles for the full timeout."""

    def __init__(self, keys: list[str | int], delay: float = 0.0) -> None:
        self.keys = list(keys)
        self.delay = delay
        self.lock = threading.Lock()

    def __call__(self, timeout: float) -> str | int | None:
        with self.lock:
            key = self.keys.pop(0) if self.keys else None
        if key is None:
            time.sleep(timeout)
            return None
        if self.delay:
            time.sleep(self.delay)
        return key


class EventSourceTests(unittest.TestCase):
    def _source(self, reader, **kwargs) -> EventSource:  # type: ignore[no-untyped-def]
        source = EventSource(reader, **kwargs)
        self.addCleanup(source.stop)
        return source.start()

    def _collect(self, source: EventSource, count: int, timeout: float = 5.0) -> list[object]:
        out: list[object] = []
        deadline = time.monotonic() + timeout
        while len(out) < count:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.fail(f"only {len(out)} of {count} events arrived")
            try:
                out.append(source.events.get(timeout=remaining))
            except queue.Empty:
                continue
        return out

    def test_keys_arrive_in_order(self) -> None:
        source = self._source(ScriptedKeys(["a", "b", "c"]), tick_rate=0.05)
        events = self._collect(source, 6)
        keys = [e.key for e in events if isinstance(e, KeyPress)]
        self.assertEqual(keys[:3], ["a", "b", "c"])

    def test_ticks_are_emitted_while_idle(self) -> None:
        source = self._source(ScriptedKeys([]), tick_rate=0.02)
        events = self._collect(source, 3)
        self.assertTrue(all(isinstance(e, Tick) for e in events))

    def test_rapid_input_does_not_starve_ticks(self) -> None:
        source = self._source(ScriptedKeys(["x"] * 400, delay=0.001), tick_rate=0.02, maxsize=8)
        events = self._collect(source, 300)
        keys = [e for e in events if isinstance(e, KeyPress)]
        ticks = [e for e in events if isinstance(e, Tick)]
        self.assertGreaterEqual(len(ticks), 3)
        self.assertEqual(len(keys) + len(ticks), 300)

    def test_no_key_is_dropped_when_queue_is_full(self) -> None:
        source = self._source(ScriptedKeys([str(i % 10) for i in range(50)]), tick_rate=10.0, maxsize=4)
        time.sleep(0.1)
        events = self._collect(source, 50)
        self.assertEqual([e.key for e in events], [str(i % 10) for i in range(50)])  # type: ignore[attr-defined]

    def test_read_failure_is_fatal(self) -> None:
        def broken(_timeout: float) -> None:
            raise OSError("tty gone")

        source = self._source(broken, tick_rate=0.05)
        with self.assertRaises(EventSourceError) as ctx:
            source.next()
        self.assertIsInstance(ctx.exception.__cause__, OSError)
        source._thread.join(1.0)
        self.assertFalse(source.alive)

    def test_posted_events_reach_the_reader(self) -> None:
        source = self._source(ScriptedKeys([]), tick_rate=10.0)
        done = RunCompleted(RequestRecord(name="r"), 1, RunResult("200", "ok"))
        source.post(done)
        self.assertIs(source.next(), done)

    def test_stop_ends_the_poller(self) -> None:
        source = self._source(ScriptedKeys([]), tick_rate=0.02)
        source.stop()
        self.assertFalse(source.alive)


if __name__ == "__main__":
    unittest.main()
