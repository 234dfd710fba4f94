from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest import mock

from reqdeck.app import App
from reqdeck.cli import main_loop, run_tui
from reqdeck.events import Event, Tick
from reqdeck.keys import KeyPress
from reqdeck.logstore import LogStore
from reqdeck.models import AppPaths, EventSourceError
from reqdeck.terminal import TerminalSession
from reqdeck.test_app import FakeRunner, FakeStore
from reqdeck.theme import Theme

CURSES_CALLS = ("initscr", "noecho", "raw", "noraw", "echo", "curs_set", "newwin", "endwin")


class TerminalSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.multiple("reqdeck.terminal.curses", **{name: mock.DEFAULT for name in CURSES_CALLS})
        self.curses = patcher.start()
        self.addCleanup(patcher.stop)
        theme = mock.patch("reqdeck.terminal.Theme.init", return_value=Theme(has_color=False))
        self.theme_init = theme.start()
        self.addCleanup(theme.stop)

    def test_leaving_the_block_restores_the_terminal(self) -> None:
        with TerminalSession() as session:
            self.assertIsNotNone(session.input_win)
            self.curses["endwin"].assert_not_called()
        self.curses["endwin"].assert_called_once_with()
        self.curses["echo"].assert_called_once_with()
        self.curses["curs_set"].assert_called_with(1)
        self.assertIsNone(session.stdscr)

    def test_error_inside_the_block_still_restores(self) -> None:
        with self.assertRaises(RuntimeError):
            with TerminalSession():
                raise RuntimeError("draw failed")
        self.curses["endwin"].assert_called_once_with()
        self.curses["noraw"].assert_called_once_with()

    def test_failed_setup_restores_and_reraises(self) -> None:
        self.theme_init.side_effect = RuntimeError("no colors")
        with self.assertRaises(RuntimeError):
            with TerminalSession():
                self.fail("body must not run")
        self.curses["endwin"].assert_called_once_with()

    def test_read_key_on_closed_session_raises(self) -> None:
        session = TerminalSession()
        with self.assertRaises(RuntimeError):
            session.read_key(0.0)


class ScriptedSource:
    """Stands in for EventSource: hands out a fixed list of events."""

    def __init__(self, events: list[Event], error: Exception | None = None) -> None:
        self.events = list(events)
        self.error = error
        self.stopped = False
        self.started = False

    def start(self) -> "ScriptedSource":
        self.started = True
        return self

    def stop(self, timeout: float = 1.0) -> None:
        self.stopped = True

    def post(self, event: Event) -> None:
        self.events.append(event)

    def next(self) -> Event:
        if self.events:
            return self.events.pop(0)
        if self.error is not None:
            raise self.error
        raise AssertionError("main loop kept reading after quit")


class FakeSession:
    def __init__(self) -> None:
        self.stdscr = object()
        self.theme = Theme(has_color=False)
        self.cursors: list[Any] = []
        self.exited = False

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.exited = True

    def show_cursor(self, cell: Any) -> None:
        self.cursors.append(cell)

    def read_key(self, timeout: float) -> None:
        return None


class MainLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        td = tempfile.TemporaryDirectory()
        self.addCleanup(td.cleanup)
        self.root = Path(td.name)
        draw = mock.patch("reqdeck.cli.draw_app", return_value=None)
        self.draw = draw.start()
        self.addCleanup(draw.stop)

    def test_loop_dispatches_until_quit(self) -> None:
        app = App(FakeStore(), FakeRunner(), LogStore(log_dir=self.root))
        source = ScriptedSource([Tick(), KeyPress.from_raw("n"), KeyPress.from_raw("q")])
        session = FakeSession()
        main_loop(app, source, session)  # type: ignore[arg-type]
        self.assertFalse(app.running)
        self.assertEqual(len(app.state.records), 1)
        self.assertEqual(source.events, [])
        self.assertEqual(self.draw.call_count, 3)
        self.assertEqual(session.cursors, [None, None, None])

    def test_event_source_failure_aborts_with_teardown(self) -> None:
        paths = AppPaths(data_dir=self.root, store_path=self.root / "requests.json", log_dir=self.root / "logs")
        source = ScriptedSource([Tick()], error=EventSourceError("terminal read failed: EIO"))
        session = FakeSession()
        with mock.patch("reqdeck.cli.TerminalSession", return_value=session), mock.patch(
            "reqdeck.cli.EventSource", return_value=source
        ):
            with self.assertRaises(EventSourceError):
                run_tui(paths, timeout=5.0)
        self.assertTrue(source.started)
        self.assertTrue(source.stopped)
        self.assertTrue(session.exited)

    def test_clean_quit_returns_zero(self) -> None:
        paths = AppPaths(data_dir=self.root, store_path=self.root / "requests.json", log_dir=self.root / "logs")
        source = ScriptedSource([KeyPress.from_raw("q")])
        session = FakeSession()
        with mock.patch("reqdeck.cli.TerminalSession", return_value=session), mock.patch(
            "reqdeck.cli.EventSource", return_value=source
        ):
            self.assertEqual(run_tui(paths, timeout=5.0), 0)
        self.assertTrue(source.stopped)
        self.assertTrue(session.exited)


if __name__ == "__main__":
    unittest.main()
