from __future__ import annotations

from dataclasses import dataclass, field

from .models import ERROR_STATUS, FIELD_COUNT, Focus, Mode, Phase, RequestRecord, RunFailure, RunOutcome


@dataclass
class InteractionState:
    records: list[RequestRecord] = field(default_factory=list)
    selected: int = 0
    phase: Phase = "list"
    field_index: int = 0
    scroll: tuple[int, int] = (0, 0)
    running: bool = True
    status_line: str = "Ready."

    @property
    def mode(self) -> Mode:
        return "edit" if self.phase == "edit" else "navigate"

    @property
    def focus(self) -> Focus:
        return "list" if self.phase == "list" else "detail"

    @property
    def current(self) -> RequestRecord | None:
        if 0 <= self.selected < len(self.records):
            return self.records[self.selected]
        return None

    def select_next(self) -> bool:
        if not self.records:
            return False
        self.selected = (self.selected + 1) % len(self.records)
        return True

    def select_prev(self) -> bool:
        if not self.records:
            return False
        self.selected = (self.selected - 1) % len(self.records)
        return True

    def set_field(self, index: int) -> None:
        self.field_index = index % FIELD_COUNT
        self.scroll = (0, 0)

    def scroll_by(self, rows: int = 0, cols: int = 0) -> None:
        row, col = self.scroll
        self.scroll = (max(0, row + rows), max(0, col + cols))

    def check(self) -> None:
        """Raise AssertionError when an invariant is broken."""
        assert 0 <= self.field_index < FIELD_COUNT, self.field_index
        if self.records:
            assert 0 <= self.selected < len(self.records), self.selected
        else:
            assert self.selected == 0, self.selected
        assert self.phase in ("list", "detail", "edit"), self.phase


def apply_run_outcome(record: RequestRecord, outcome: RunOutcome) -> None:
    if isinstance(outcome, RunFailure):
        record.last_status = ERROR_STATUS
        record.last_response = outcome.message
    else:
        record.last_status = outcome.status
        record.last_response = outcome.body
    record.in_flight = False
