"""Recursive git repository discovery."""

from __future__ import annotations

import logging as py_logging
import os
import sys
from collections.abc import Sequence
from typing import TextIO

from gitglobal.config import GlobalConfig
from gitglobal.models import Repo

logger = py_logging.getLogger(__name__)

GIT_MARKER = ".git"


def path_filter(path: str, ignored_patterns: Sequence[str]) -> bool:
    """Return True if ``path`` should be kept, i.e. no ignore pattern is a substring of it."""
    return not any(pattern and pattern in path for pattern in ignored_patterns)


def _is_marker(entry: os.DirEntry[str]) -> bool:
    return entry.name == GIT_MARKER and entry.is_dir(follow_symlinks=False)


def _is_storable(path: str) -> bool:
    # one path per cache line
    if "\n" in path or "\r" in path:
        return False
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def find_repos(config: GlobalConfig, *, out: TextIO | None = None) -> list[Repo]:
    """Walk ``config.basedir`` depth-first and return every repository found, sorted by path."""
    basedir = os.path.abspath(config.basedir)
    patterns = config.ignored_patterns
    print(
        f"Scanning for git repos under {basedir}; this may take a while...",
        file=out or sys.stdout,
    )
    logger.debug("Starting repository walk basedir=%s ignored=%s", basedir, patterns)

    repos: list[Repo] = []
    if not path_filter(basedir, patterns):
        logger.debug("Base directory excluded by ignore patterns basedir=%s", basedir)
        return repos

    stack = [basedir]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as iterator:
                entries = list(iterator)
        except OSError as exc:
            logger.debug("Skipping unreadable directory path=%s error=%s", current, exc)
            continue

        subdirs: list[str] = []
        for entry in entries:
            if not path_filter(entry.path, patterns):
                continue
            try:
                if _is_marker(entry):
                    parent = os.path.dirname(entry.path)
                    if parent and _is_storable(parent):
                        repos.append(Repo(parent))
                    else:
                        logger.debug("Skipping marker without usable parent path=%r", entry.path)
                elif entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
            except OSError as exc:
                logger.debug("Skipping entry path=%s error=%s", entry.path, exc)

        # reversed so siblings are visited in enumeration order
        stack.extend(reversed(subdirs))

    repos.sort(key=lambda repo: repo.path)
    logger.debug("Repository walk finished basedir=%s found=%s", basedir, len(repos))
    return repos
