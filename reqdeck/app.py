"""Interaction state machine: records, focus/mode and the four edit buffers."""

from __future__ import annotations

import curses
import threading
from typing import Callable, Protocol

from .events import Event, RunCompleted, Tick
from .keys import ENTER_KEYS, ESCAPE_KEYS, KeyPress
from .logstore import LogStore
from .models import (
    FIELD_DEFS,
    Phase,
    RequestRecord,
    RunFailure,
    RunOutcome,
    StoreError,
    parse_method,
)
from .state import InteractionState, apply_run_outcome
from .textinput import TextInput


class Store(Protocol):
    def load_all(self) -> dict[str, RequestRecord]: ...

    def create(self, record: RequestRecord) -> str: ...

    def update(self, rid: str, record: RequestRecord) -> None: ...

    def delete(self, rid: str) -> None: ...


class Runner(Protocol):
    def run(self, method: str, url: str, body: str) -> RunOutcome: ...


Handler = Callable[[], None]
NAVIGATE_PHASES: tuple[Phase, ...] = ("list", "detail")


class App:
    def __init__(
        self,
        store: Store,
        runner: Runner,
        logstore: LogStore,
        post: Callable[[Event], None] | None = None,
    ) -> None:
        self.store = store
        self.runner = runner
        self.logstore = logstore
        # None runs requests inline on the dispatching thread.
        self.post = post
        self.state = InteractionState(records=list(store.load_all().values()))
        self.inputs = [TextInput(multiline=f.multiline) for f in FIELD_DEFS]
        self._seq = 0
        self.bindings = self._build_bindings()
        self.refresh_inputs()
        self.logstore.append("info", "store", f"loaded {len(self.state.records)} request(s)")

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def focused_input(self) -> TextInput:
        return self.inputs[self.state.field_index]

    def _build_bindings(self) -> dict[tuple[Phase, object], Handler]:
        table: dict[tuple[Phase, object], Handler] = {}
        for phase in NAVIGATE_PHASES:
            for key in (*ESCAPE_KEYS, "q"):
                table[(phase, key)] = self.quit
            for key in ("h", "l"):
                table[(phase, key)] = self.toggle_focus
            for key in ENTER_KEYS:
                table[(phase, key)] = self.run_selected
            table[(phase, curses.KEY_LEFT)] = lambda: self.state.scroll_by(cols=-1)
            table[(phase, curses.KEY_RIGHT)] = lambda: self.state.scroll_by(cols=1)
            table[(phase, "i")] = self.begin_edit
            table[(phase, "n")] = self.new_record
            table[(phase, "x")] = self.delete_selected

        table[("list", "j")] = self.select_next
        table[("list", "k")] = self.select_prev
        table[("list", "J")] = self.move_down
        table[("list", "K")] = self.move_up

        table[("detail", "j")] = lambda: self.state.set_field(self.state.field_index + 1)
        table[("detail", "k")] = lambda: self.state.set_field(self.state.field_index - 1)
        table[("detail", curses.KEY_DOWN)] = lambda: self.state.scroll_by(rows=1)
        table[("detail", curses.KEY_UP)] = lambda: self.state.scroll_by(rows=-1)

        for key in ESCAPE_KEYS:
            table[("edit", key)] = self.cancel_edit
        for key in ENTER_KEYS:
            table[("edit", key)] = self.commit_edit
        return table

    def handle(self, event: Event) -> None:
        if isinstance(event, Tick):
            return
        if isinstance(event, RunCompleted):
            self.finish_run(event.record, event.seq, event.outcome)
            return
        self.handle_key(event)

    def handle_key(self, press: KeyPress) -> None:
        handler = self.bindings.get((self.state.phase, press.key))
        if handler is not None:
            handler()
        elif self.state.phase == "edit":
            self.focused_input.handle(press)

    def refresh_inputs(self) -> None:
        record = self.state.current
        for idx, buf in enumerate(self.inputs):
            if record is None:
                buf.reset()
            else:
                buf.set(record.field_value(idx))

    def quit(self) -> None:
        self.state.running = False

    def select_next(self) -> None:
        if self.state.select_next():
            self.refresh_inputs()

    def select_prev(self) -> None:
        if self.state.select_prev():
            self.refresh_inputs()

    def move_down(self) -> None:
        records, idx = self.state.records, self.state.selected
        if idx < len(records) - 1:
            records[idx], records[idx + 1] = records[idx + 1], records[idx]
            self.state.selected = idx + 1

    def move_up(self) -> None:
        records, idx = self.state.records, self.state.selected
        if 0 < idx < len(records):
            records[idx], records[idx - 1] = records[idx - 1], records[idx]
            self.state.selected = idx - 1

    def toggle_focus(self) -> None:
        if self.state.phase == "list":
            self.state.phase = "detail"
            return
        self.state.phase = "list"
        self.state.field_index = 0
        self.state.scroll = (0, 0)

    def begin_edit(self) -> None:
        self.state.phase = "edit"

    def new_record(self) -> None:
        record = RequestRecord(name=f"Request #{len(self.state.records) + 1}")
        self.state.records.append(record)
        self.state.selected = len(self.state.records) - 1
        self.refresh_inputs()
        if self.save(record):
            self.state.status_line = f"Created {record.name}."

    def delete_selected(self) -> None:
        record = self.state.current
        if record is None:
            return
        if record.storage_id:
            try:
                self.store.delete(record.storage_id)
            except StoreError as exc:
                self._store_failed("delete", record, exc)
                return
        del self.state.records[self.state.selected]
        if self.state.selected > 0:
            self.state.selected -= 1
        self.refresh_inputs()
        self.logstore.append("info", "store", f"deleted {record.name} ({record.storage_id or 'unsaved'})")
        self.state.status_line = f"Deleted {record.name}."

    def cancel_edit(self) -> None:
        self.refresh_inputs()
        self.state.phase = "detail"

    def commit_edit(self) -> None:
        record = self.state.current
        if record is None:
            return
        idx = self.state.field_index
        text = self.inputs[idx].value
        name = FIELD_DEFS[idx].name
        self.state.phase = "detail"
        if name == "method":
            verb = parse_method(text)
            if verb is None:
                # Nothing changed, so there is nothing to save.
                self.refresh_inputs()
                self.state.status_line = f"Invalid method {text.strip()!r}; kept {record.method}."
                return
            record.method = verb
        else:
            setattr(record, name, text)
        self.refresh_inputs()
        if self.save(record):
            self.state.status_line = f"Saved {FIELD_DEFS[idx].label} of {record.name}."

    def save(self, record: RequestRecord) -> bool:
        try:
            if record.storage_id:
                self.store.update(record.storage_id, record)
            else:
                record.storage_id = self.store.create(record)
        except StoreError as exc:
            self._store_failed("save", record, exc)
            return False
        self.logstore.append("debug", "store", f"saved {record.name} ({record.storage_id})")
        return True

    def _store_failed(self, action: str, record: RequestRecord, exc: StoreError) -> None:
        self.logstore.append("error", "store", f"{action} failed for {record.name}: {exc}")
        self.state.status_line = f"Could not {action} {record.name}: {exc}"

    def run_selected(self) -> None:
        record = self.state.current
        if record is None:
            return
        self._seq += 1
        seq = self._seq
        record.run_seq = seq
        record.in_flight = True
        method, url, body = record.method, record.url, record.body
        self.logstore.append("info", "runner", f"run #{seq}: {method} {url}")
        self.state.status_line = f"Running {method} {url} ..."

        if self.post is None:
            self.finish_run(record, seq, self._execute(method, url, body))
            return

        post = self.post

        def worker() -> None:
            post(RunCompleted(record, seq, self._execute(method, url, body)))

        threading.Thread(target=worker, name=f"reqdeck-run-{seq}", daemon=True).start()

    def _execute(self, method: str, url: str, body: str) -> RunOutcome:
        try:
            return self.runner.run(method, url, body)
        except Exception as exc:
            return RunFailure(f"{type(exc).__name__}: {exc}")

    def finish_run(self, record: RequestRecord, seq: int, outcome: RunOutcome) -> None:
        if not any(r is record for r in self.state.records):
            self.logstore.append("warn", "runner", f"run #{seq}: {record.name} was deleted, result discarded")
            return
        if record.run_seq != seq:
            self.logstore.append("debug", "runner", f"run #{seq}: superseded by #{record.run_seq}, result discarded")
            return
        apply_run_outcome(record, outcome)
        level = "warn" if isinstance(outcome, RunFailure) else "info"
        self.logstore.append(level, "runner", f"run #{seq}: {record.name} -> {record.last_status}")
        self.state.status_line = f"{record.name}: {record.last_status}"
        if record.storage_id:
            self.save(record)
