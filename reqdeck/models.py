from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Union

Phase = Literal["list", "detail", "edit"]
Mode = Literal["navigate", "edit"]
Focus = Literal["list", "detail"]

HTTP_METHODS: tuple[str, ...] = (
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "CONNECT",
    "TRACE",
)
DEFAULT_METHOD = "GET"
ERROR_STATUS = "Error"


class ReqdeckError(Exception):
    pass


class StoreError(ReqdeckError):
    pass


class EventSourceError(ReqdeckError):
    pass


class StartupError(ReqdeckError):
    pass


def parse_method(text: str) -> str | None:
    """Return the canonical verb for ``text`` or None when it is not one."""
    verb = text.strip().upper()
    if verb in HTTP_METHODS:
        return verb
    return None


@dataclass(frozen=True)
class FieldDef:
    name: str
    label: str
    multiline: bool = False


FIELD_DEFS: tuple[FieldDef, ...] = (
    FieldDef("name", "Name"),
    FieldDef("method", "Request Type"),
    FieldDef("url", "Url"),
    FieldDef("body", "Body", multiline=True),
)
FIELD_COUNT = len(FIELD_DEFS)

_PERSISTED = ("name", "method", "url", "body", "last_status", "last_response", "storage_id")


@dataclass
class RequestRecord:
    name: str
    method: str = DEFAULT_METHOD
    url: str = ""
    body: str = ""
    last_status: str = ""
    last_response: str = ""
    storage_id: str = ""
    # Runtime only; never written to the store.
    run_seq: int = field(default=0, repr=False, compare=False)
    in_flight: bool = field(default=False, repr=False, compare=False)

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, key) for key in _PERSISTED}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RequestRecord":
        values = {key: str(raw.get(key) or "") for key in _PERSISTED}
        values["method"] = values["method"] or DEFAULT_METHOD
        return cls(**values)

    def field_value(self, index: int) -> str:
        return str(getattr(self, FIELD_DEFS[index].name))


@dataclass(frozen=True)
class RunResult:
    status: str
    body: str


@dataclass(frozen=True)
class RunFailure:
    message: str


RunOutcome = Union[RunResult, RunFailure]


@dataclass
class AppPaths:
    data_dir: Path
    store_path: Path
    log_dir: Path
