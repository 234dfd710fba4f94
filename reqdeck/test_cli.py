from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from reqdeck.cli import main
from reqdeck.models import RequestRecord, StartupError
from reqdeck.store import RequestStore
from reqdeck.system_ops import detect_paths


class DetectPathsTests(unittest.TestCase):
    def test_explicit_data_dir_is_used(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            paths = detect_paths(Path(td) / "data")
            self.assertEqual(paths.data_dir, Path(td) / "data")
            self.assertEqual(paths.store_path, Path(td) / "data" / "requests.json")
            self.assertEqual(paths.log_dir, Path(td) / "data" / "logs")
            self.assertTrue(paths.data_dir.is_dir())

    def test_unusable_explicit_data_dir_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            blocker = Path(td) / "file"
            blocker.write_text("x", encoding="utf-8")
            with self.assertRaises(StartupError):
                detect_paths(blocker)

    def test_env_home_takes_precedence(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with mock.patch.dict(os.environ, {"REQDECK_HOME": td}):
                paths = detect_paths(log_dir=Path(td) / "elsewhere")
            self.assertEqual(paths.data_dir, Path(td))
            self.assertEqual(paths.log_dir, Path(td) / "elsewhere")

    def test_falls_back_to_cache_dir(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            home = Path(td)
            (home / ".reqdeck").write_text("not a directory", encoding="utf-8")
            with mock.patch.dict(os.environ, {"REQDECK_HOME": ""}), mock.patch(
                "reqdeck.system_ops.Path.home", return_value=home
            ):
                paths = detect_paths()
            self.assertEqual(paths.data_dir, home / ".cache" / "reqdeck")


class MainTests(unittest.TestCase):
    def test_list_prints_saved_requests(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = RequestStore(Path(td) / "requests.json")
            store.create(RequestRecord(name="ping", method="GET", url="http://localhost/ping", last_status="200"))
            out = io.StringIO()
            with redirect_stdout(out):
                code = main(["--data-dir", td, "--list"])
            self.assertEqual(code, 0)
            self.assertIn("ping", out.getvalue())
            self.assertIn("200", out.getvalue())

    def test_startup_failure_exits_non_zero(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            blocker = Path(td) / "file"
            blocker.write_text("x", encoding="utf-8")
            err = io.StringIO()
            with redirect_stderr(err):
                code = main(["--data-dir", str(blocker), "--list"])
            self.assertEqual(code, 1)
            self.assertIn("reqdeck:", err.getvalue())

    def test_corrupt_store_exits_non_zero(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "requests.json").write_text("[", encoding="utf-8")
            err = io.StringIO()
            with redirect_stderr(err):
                code = main(["--data-dir", td, "--list"])
            self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
