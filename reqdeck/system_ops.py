from __future__ import annotations

import os
from pathlib import Path

from .models import AppPaths, StartupError

HOME_ENV = "REQDECK_HOME"
STORE_FILENAME = "requests.json"


def _writable(candidate: Path) -> str:
    """Empty string when ``candidate`` can be created and written, else the reason."""
    try:
        candidate.mkdir(parents=True, exist_ok=True)
        probe = candidate / ".write-test"
        with probe.open("w", encoding="utf-8") as fh:
            fh.write("ok\n")
        probe.unlink(missing_ok=True)
    except PermissionError as exc:
        return f"permission denied for {candidate}: {exc}"
    except OSError as exc:
        return f"cannot use {candidate}: {exc}"
    return ""


def detect_paths(data_dir: Path | None = None, log_dir: Path | None = None) -> AppPaths:
    # 1) Explicit --data-dir: use it or fail, never silently relocate.
    if data_dir is not None:
        err = _writable(data_dir)
        if err:
            raise StartupError(err)
        chosen = data_dir
    # 2) REQDECK_HOME, 3) ~/.reqdeck, 4) ~/.cache/reqdeck.
    else:
        candidates: list[Path] = []
        env_home = os.environ.get(HOME_ENV, "").strip()
        if env_home:
            candidates.append(Path(env_home).expanduser())
        try:
            home = Path.home()
        except RuntimeError as exc:
            if not candidates:
                raise StartupError(f"cannot resolve home directory: {exc}") from exc
        else:
            candidates.append(home / ".reqdeck")
            candidates.append(home / ".cache" / "reqdeck")
        errors: list[str] = []
        chosen = None
        for candidate in candidates:
            err = _writable(candidate)
            if not err:
                chosen = candidate
                break
            errors.append(err)
        if chosen is None:
            raise StartupError("no writable data directory: " + "; ".join(errors))

    return AppPaths(
        data_dir=chosen,
        store_path=chosen / STORE_FILENAME,
        log_dir=log_dir if log_dir is not None else chosen / "logs",
    )
