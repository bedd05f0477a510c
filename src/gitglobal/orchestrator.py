"""Cache-gated repository lookup."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable

from gitglobal.cache import RepoCacheStore
from gitglobal.config import GlobalConfig
from gitglobal.git.repo_discovery import find_repos
from gitglobal.models import Repo

logger = py_logging.getLogger(__name__)

RepoWalker = Callable[[GlobalConfig], list[Repo]]


def _store_for(config: GlobalConfig, store: RepoCacheStore | None) -> RepoCacheStore:
    return store or RepoCacheStore.from_config(config)


def get_repos(
    config: GlobalConfig,
    *,
    store: RepoCacheStore | None = None,
    walker: RepoWalker = find_repos,
) -> list[Repo]:
    """Return all known repositories, walking and populating the cache on a miss."""
    cache = _store_for(config, store)
    if cache.has_cache():
        logger.debug("Cache hit path=%s", cache.cache_file)
        return cache.read()

    logger.debug("Cache miss path=%s", cache.cache_file)
    repos = walker(config)
    cache.write(repos)
    return repos


def rescan_repos(
    config: GlobalConfig,
    *,
    store: RepoCacheStore | None = None,
    walker: RepoWalker = find_repos,
) -> list[Repo]:
    cache = _store_for(config, store)
    cache.clear()
    return get_repos(config, store=cache, walker=walker)


def clear_cache(config: GlobalConfig, *, store: RepoCacheStore | None = None) -> bool:
    return _store_for(config, store).clear()
