from __future__ import annotations

import hashlib
import subprocess
import sys
from pathlib import Path

import pytest

from zcc.core.resilience import retry_with_backoff
from zcc.core.utils.io import read_json, remove_empty_dirs, sha256_file, write_json_atomic
from zcc.core.utils.merge import deep_merge
from zcc.core.utils.paths import is_within, resolve_project_root
from zcc.core.utils.subprocess import run_with_timeout
from zcc.core.utils.time import utc_timestamp


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": 1, "nested": {"x": 1, "y": [1, 2]}}
    override = {"nested": {"y": [3], "z": True}, "b": 2}

    merged = deep_merge(base, override)

    assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": [3], "z": True}}
    assert base == {"a": 1, "nested": {"x": 1, "y": [1, 2]}}


class TestProjectRoot:
    def test_env_wins(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("ZCC_PROJECT_ROOT", str(tmp_path / "elsewhere"))
        assert resolve_project_root(tmp_path) == (tmp_path / "elsewhere").resolve()

    def test_nearest_marker(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        assert resolve_project_root(nested) == tmp_path.resolve()

    def test_zcc_dir_beats_outer_git(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        inner = tmp_path / "inner"
        (inner / ".zcc").mkdir(parents=True)
        assert resolve_project_root(inner) == inner.resolve()

    def test_is_within(self, tmp_path: Path) -> None:
        assert is_within(tmp_path / "a" / "b", tmp_path)
        assert is_within(tmp_path, tmp_path)
        assert not is_within(tmp_path / ".." / "other", tmp_path)


class TestRunWithTimeout:
    def test_captures_output_and_stdin(self) -> None:
        result = run_with_timeout(
            [sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
            timeout=10,
            input="hello",
        )
        assert result.returncode == 0
        assert result.stdout.strip() == "HELLO"

    def test_nonzero_exit(self) -> None:
        result = run_with_timeout("echo oops >&2; exit 3", timeout=10, shell=True)
        assert result.returncode == 3
        assert "oops" in result.stderr

    def test_timeout_raises(self) -> None:
        with pytest.raises(subprocess.TimeoutExpired):
            run_with_timeout("sleep 5", timeout=0.2, shell=True)


class TestRetryWithBackoff:
    def test_linear_delays_then_success(self) -> None:
        delays: list[float] = []
        calls = {"n": 0}

        @retry_with_backoff(max_attempts=3, initial_delay=1.0, sleep=delays.append)
        def flaky() -> str:
            calls["n"] += 1
            if calls["n"] < 3:
                raise ConnectionError("down")
            return "ok"

        assert flaky() == "ok"
        assert delays == [1.0, 2.0]

    def test_gives_up_after_max_attempts(self) -> None:
        delays: list[float] = []

        @retry_with_backoff(max_attempts=2, initial_delay=0.5, sleep=delays.append)
        def broken() -> None:
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            broken()
        assert delays == [0.5]

    def test_retry_if_short_circuits(self) -> None:
        delays: list[float] = []

        @retry_with_backoff(max_attempts=5, sleep=delays.append, retry_if=lambda e: not isinstance(e, ValueError))
        def bad_input() -> None:
            raise ValueError("no")

        with pytest.raises(ValueError):
            bad_input()
        assert delays == []


class TestIo:
    def test_json_roundtrip_and_default(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "data.json"
        assert read_json(target, default={"empty": True}) == {"empty": True}
        with pytest.raises(FileNotFoundError):
            read_json(target)

        write_json_atomic(target, {"name": "zcc", "ünï": 1})

        assert read_json(target) == {"name": "zcc", "ünï": 1}
        assert target.read_text(encoding="utf-8").endswith("}\n")
        assert not [p for p in target.parent.iterdir() if p.name.startswith(".data.json.")]

    def test_sha256_file(self, tmp_path: Path) -> None:
        target = tmp_path / "f.txt"
        target.write_bytes(b"abc")
        assert sha256_file(target) == hashlib.sha256(b"abc").hexdigest()

    def test_remove_empty_dirs(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        full = tmp_path / "full"
        empty.mkdir()
        full.mkdir()
        (full / "keep").write_text("x", encoding="utf-8")

        assert remove_empty_dirs([empty, full, tmp_path / "missing"]) == [empty]
        assert full.exists()


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "T" in stamp
    assert len(stamp.split(".")[-1]) == 4
