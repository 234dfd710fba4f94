"""Command line handling and the curses main loop."""

from __future__ import annotations

import argparse
import curses
import sys
from pathlib import Path

from . import __version__
from .app import App
from .events import EventSource
from .logstore import LogStore
from .models import AppPaths, EventSourceError, ReqdeckError
from .runner import DEFAULT_TIMEOUT, RequestRunner
from .screen import draw_app
from .store import RequestStore
from .system_ops import detect_paths
from .terminal import TerminalSession


def main_loop(app: App, source: EventSource, session: TerminalSession) -> None:
    assert session.stdscr is not None
    while app.running:
        cursor = draw_app(session.stdscr, session.theme, app)
        session.show_cursor(cursor)
        app.handle(source.next())


def run_tui(paths: AppPaths, timeout: float) -> int:
    logstore = LogStore(log_dir=paths.log_dir)
    store = RequestStore(paths.store_path)
    runner = RequestRunner(timeout=timeout)

    with TerminalSession() as session:
        source = EventSource(session.read_key)
        app = App(store, runner, logstore, post=source.post)
        source.start()
        try:
            main_loop(app, source, session)
        except EventSourceError as exc:
            logstore.append("error", "input", str(exc))
            raise
        finally:
            source.stop()
    logstore.append("info", "system", "clean exit")
    return 0


def print_records(paths: AppPaths) -> int:
    records = RequestStore(paths.store_path).load_all()
    if not records:
        print(f"No saved requests in {paths.store_path}")
        return 0
    for record in records.values():
        status = record.last_status or "-"
        print(f"{record.method:<7} {status:<6} {record.name}  {record.url}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="reqdeck",
        description="Terminal client for composing, storing and firing HTTP requests",
    )
    parser.add_argument("--data-dir", type=Path, help="Directory holding requests.json (default: $REQDECK_HOME or ~/.reqdeck)")
    parser.add_argument("--log-dir", type=Path, help="Directory for session logs (default: <data-dir>/logs)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Per-request timeout in seconds")
    parser.add_argument("--list", action="store_true", help="Print saved requests and exit (no TUI)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    if args.timeout <= 0:
        parser.error("--timeout must be positive")

    try:
        paths = detect_paths(args.data_dir, args.log_dir)
        if args.list:
            return print_records(paths)
        return run_tui(paths, args.timeout)
    except KeyboardInterrupt:
        return 130
    except curses.error as exc:
        print(f"reqdeck: cannot initialize terminal: {exc}", file=sys.stderr)
        return 1
    except ReqdeckError as exc:
        print(f"reqdeck: {exc}", file=sys.stderr)
        return 1
