from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

_SRC = Path(__file__).resolve().parents[2] / "src"


def _env(home: Path) -> dict[str, str]:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = f"{_SRC}{os.pathsep}{existing}" if existing else str(_SRC)
    env["HOME"] = str(home)
    env["GIT_CONFIG_GLOBAL"] = str(home / ".gitconfig")
    env["XDG_CACHE_HOME"] = str(home / ".cache")
    return env


def _run(home: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "gitglobal", *args],
        capture_output=True,
        text=True,
        check=False,
        env=_env(home),
    )


def test_cli_module_reports_invalid_args_via_exit_code(tmp_path: Path) -> None:
    completed = _run(tmp_path, "--log-level", "LOUD", "--log-file", str(tmp_path / "gg.log"))

    assert completed.returncode == 2
    assert "--log-level must be one of" in completed.stderr


@pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")
def test_cli_module_discovers_and_caches_repositories(tmp_path: Path) -> None:
    base = tmp_path / "code"
    (base / "proj" / ".git").mkdir(parents=True)
    (base / "deps-cache" / "lib" / ".git").mkdir(parents=True)
    (tmp_path / ".gitconfig").write_text(
        f"[global]\n\tbasedir = {base.as_posix()}\n\tignore = deps-cache\n",
        encoding="utf-8",
    )

    first = _run(tmp_path, "list")
    second = _run(tmp_path, "list")

    assert first.returncode == 0, first.stderr
    assert first.stdout.splitlines() == [
        f"Scanning for git repos under {base.as_posix()}; this may take a while...",
        str(Path(base.as_posix()) / "proj"),
    ]
    assert second.stdout.splitlines() == [str(Path(base.as_posix()) / "proj")]
