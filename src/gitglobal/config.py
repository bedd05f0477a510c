"""Layered configuration: defaults, global git settings, explicit overrides."""

from __future__ import annotations

import logging as py_logging
import os
import subprocess
import sys
from collections.abc import Callable, Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitglobal.errors import ExitCode, GitGlobalError

logger = py_logging.getLogger(__name__)

APP_NAME = "git-global"
CACHE_FILE = "repos.txt"
SETTING_BASEDIR = "global.basedir"
SETTING_IGNORED = "global.ignore"

SubprocessRunner = Callable[..., subprocess.CompletedProcess]


class GlobalConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    basedir: Path
    ignored_patterns: list[str] = Field(default_factory=list)
    cache_file: Path

    @field_validator("ignored_patterns")
    @classmethod
    def _normalize_patterns(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item.strip()]


def _expand(value: str | Path) -> Path:
    try:
        return Path(value).expanduser()
    except RuntimeError:
        return Path(value)


def parse_ignored_patterns(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def home_directory() -> Path:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as exc:
        raise GitGlobalError(
            "Could not determine home directory",
            code=ExitCode.CONFIG_ERROR,
            hint="Set the HOME environment variable.",
        ) from exc


def resolve_cache_dir(
    *,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> Path:
    env = os.environ if environ is None else environ
    system = platform or sys.platform

    if system.startswith("win"):
        local_app_data = env.get("LOCALAPPDATA", "").strip()
        if not local_app_data:
            raise GitGlobalError(
                "Could not resolve the cache directory",
                code=ExitCode.CONFIG_ERROR,
                hint="Set LOCALAPPDATA or pass --cache-file.",
            )
        return Path(local_app_data) / APP_NAME / "Cache"

    base_home = home or home_directory()
    if system == "darwin":
        return base_home / "Library" / "Caches" / APP_NAME

    xdg_cache = env.get("XDG_CACHE_HOME", "").strip()
    if xdg_cache and Path(xdg_cache).is_absolute():
        return Path(xdg_cache) / APP_NAME
    return base_home / ".cache" / APP_NAME


def resolve_cache_file(
    *,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> Path:
    return resolve_cache_dir(home=home, environ=environ, platform=platform) / CACHE_FILE


def read_git_setting(key: str, runner: SubprocessRunner = subprocess.run) -> str | None:
    """Return a value from the user's global git config, or None when it is unavailable."""
    try:
        result = runner(
            ["git", "config", "--global", "--get", key],
            capture_output=True,
            text=True,
            check=False,
        )
    except (FileNotFoundError, OSError) as exc:
        logger.debug("Global git config unavailable key=%s error=%s", key, exc)
        return None

    if result.returncode == 1:
        logger.debug("Global git setting not set key=%s", key)
        return None
    if result.returncode != 0:
        logger.warning(
            "Could not read global git setting key=%s stderr=%s",
            key,
            (result.stderr or "").strip(),
        )
        return None
    return result.stdout.strip()


def load_config(
    *,
    runner: SubprocessRunner = subprocess.run,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
    basedir: str | Path | None = None,
    cache_file: str | Path | None = None,
) -> GlobalConfig:
    home_dir = home or home_directory()

    resolved_basedir = home_dir
    configured_basedir = read_git_setting(SETTING_BASEDIR, runner)
    if configured_basedir:
        resolved_basedir = _expand(configured_basedir)

    patterns: list[str] = []
    configured_patterns = read_git_setting(SETTING_IGNORED, runner)
    if configured_patterns:
        patterns = parse_ignored_patterns(configured_patterns)

    if basedir is not None:
        resolved_basedir = _expand(basedir)

    if cache_file is not None:
        resolved_cache_file = _expand(cache_file)
    else:
        resolved_cache_file = resolve_cache_file(home=home_dir, environ=environ, platform=platform)

    config = GlobalConfig(
        basedir=resolved_basedir,
        ignored_patterns=patterns,
        cache_file=resolved_cache_file,
    )
    logger.debug(
        "Loaded configuration basedir=%s ignored=%s cache_file=%s",
        config.basedir,
        config.ignored_patterns,
        config.cache_file,
    )
    return config
