from __future__ import annotations

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any

from .models import RequestRecord, StoreError


class RequestStore:
    """Request records kept in one JSON document keyed by an opaque id."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load_all(self) -> dict[str, RequestRecord]:
        raw = self._read()
        out: dict[str, RequestRecord] = {}
        for rid, payload in raw.items():
            if not isinstance(payload, dict):
                raise StoreError(f"malformed record {rid!r} in {self.path}")
            record = RequestRecord.from_dict(payload)
            record.storage_id = rid
            out[rid] = record
        return out

    def create(self, record: RequestRecord) -> str:
        raw = self._read()
        rid = uuid.uuid4().hex
        while rid in raw:
            rid = uuid.uuid4().hex
        payload = record.to_dict()
        payload["storage_id"] = rid
        raw[rid] = payload
        self._write(raw)
        return rid

    def update(self, rid: str, record: RequestRecord) -> None:
        raw = self._read()
        if rid not in raw:
            raise StoreError(f"unknown request id {rid!r}")
        payload = record.to_dict()
        payload["storage_id"] = rid
        raw[rid] = payload
        self._write(raw)

    def delete(self, rid: str) -> None:
        raw = self._read()
        if rid not in raw:
            raise StoreError(f"unknown request id {rid!r}")
        del raw[rid]
        self._write(raw)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise StoreError(f"corrupt store {self.path}: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"corrupt store {self.path}: expected an object")
        return data

    def _write(self, raw: dict[str, Any]) -> None:
        tmp_name = ""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".requests-", suffix=".json", dir=str(self.path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(raw, fh, indent=2)
                fh.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"cannot write {self.path}: {exc}") from exc
