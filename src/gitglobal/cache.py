"""Flat-file cache of discovered repository paths."""

from __future__ import annotations

import logging as py_logging
import os
from collections.abc import Sequence
from contextlib import suppress
from pathlib import Path

from gitglobal.config import GlobalConfig
from gitglobal.errors import ExitCode, GitGlobalError
from gitglobal.models import Repo

logger = py_logging.getLogger(__name__)


class RepoCacheStore:
    """Reads and writes the ordered repository list, one path per line."""

    def __init__(self, cache_file: str | Path) -> None:
        self.cache_file = Path(cache_file)

    @classmethod
    def from_config(cls, config: GlobalConfig) -> RepoCacheStore:
        return cls(config.cache_file)

    def has_cache(self) -> bool:
        return self.cache_file.exists()

    def write(self, repos: Sequence[Repo]) -> Path:
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Could not create cache directory path=%s error=%s", self.cache_file.parent, exc)
            raise GitGlobalError(
                f"Could not create cache directory: {self.cache_file.parent}",
                code=ExitCode.CACHE_ERROR,
                hint="Check permissions on the cache location or pass --cache-file.",
            ) from exc

        staging = self.cache_file.with_name(f"{self.cache_file.name}.tmp")
        try:
            payload = "".join(f"{repo.path}\n" for repo in repos).encode("utf-8")
            staging.write_bytes(payload)
            os.replace(staging, self.cache_file)
        except (OSError, UnicodeEncodeError) as exc:
            with suppress(OSError):
                staging.unlink()
            logger.error("Problem writing cache file path=%s error=%s", self.cache_file, exc)
            raise GitGlobalError(
                f"Problem writing cache file: {self.cache_file}",
                code=ExitCode.CACHE_ERROR,
                hint="Check free space and permissions, then run `git-global scan`.",
            ) from exc

        logger.debug("Cached %s repositories path=%s", len(repos), self.cache_file)
        return self.cache_file

    def read(self) -> list[Repo]:
        try:
            raw = self.cache_file.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.error("Could not open cache file path=%s error=%s", self.cache_file, exc)
            raise GitGlobalError(
                f"Could not open cache file: {self.cache_file}",
                code=ExitCode.CACHE_ERROR,
                hint="Fix permissions or run `git-global clear-cache`.",
            ) from exc

        repos: list[Repo] = []
        for number, line in enumerate(raw.split(b"\n"), start=1):
            try:
                path = line.decode("utf-8").rstrip("\r")
            except UnicodeDecodeError:
                logger.debug("Skipping undecodable cache line=%s path=%s", number, self.cache_file)
                continue
            if not path.strip():
                continue
            repos.append(Repo(path))

        logger.debug("Loaded %s repositories from cache path=%s", len(repos), self.cache_file)
        return repos

    def clear(self) -> bool:
        try:
            self.cache_file.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Could not remove cache file path=%s error=%s", self.cache_file, exc)
            raise GitGlobalError(
                f"Could not remove cache file: {self.cache_file}",
                code=ExitCode.CACHE_ERROR,
                hint="Delete the file manually.",
            ) from exc
        logger.debug("Removed cache file path=%s", self.cache_file)
        return True
