from __future__ import annotations

import subprocess
from pathlib import Path

import pytest


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))

        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    return home


def _git_config_runner(settings: dict[str, str]):
    calls: list[list[str]] = []

    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        calls.append(cmd)
        key = cmd[-1]
        if key in settings:
            return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=settings[key] + "\n", stderr="")
        return subprocess.CompletedProcess(args=cmd, returncode=1, stdout="", stderr="")

    runner.calls = calls  # type: ignore[attr-defined]
    return runner


@pytest.fixture
def fake_git_config():
    """Factory for fake `subprocess.run` callables answering `git config --global --get <key>`."""
    return _git_config_runner
