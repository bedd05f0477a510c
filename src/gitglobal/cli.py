"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from .cache import RepoCacheStore
from .config import GlobalConfig, SubprocessRunner, load_config
from .errors import ExitCode, GitGlobalError, user_facing_error
from .logging import configure_logging, default_log_path
from .orchestrator import clear_cache, get_repos, rescan_repos

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
_COMMANDS = ("list", "scan", "info", "clear-cache")


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-global",
        description="Find and cache every git repository under a base directory.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=_COMMANDS,
        default="list",
        help="list (default), scan, info or clear-cache",
    )
    parser.add_argument("--basedir", type=Path, default=None, help="Override global.basedir")
    parser.add_argument("--cache-file", type=Path, default=None, help="Override the cache file location")
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def _print_repos(config: GlobalConfig) -> int:
    for repo in get_repos(config):
        print(repo.path)
    return int(ExitCode.SUCCESS)


def _scan(config: GlobalConfig) -> int:
    repos = rescan_repos(config)
    print(f"Found {len(repos)} repos.")
    return int(ExitCode.SUCCESS)


def _info(config: GlobalConfig) -> int:
    store = RepoCacheStore.from_config(config)
    patterns = ", ".join(config.ignored_patterns) or "(none)"
    print(f"Base directory:   {config.basedir}")
    print(f"Ignored patterns: {patterns}")
    print(f"Cache file:       {config.cache_file}")
    if store.has_cache():
        print(f"Cached repos:     {len(store.read())}")
    else:
        print("Cached repos:     (no cache; run `git-global scan`)")
    return int(ExitCode.SUCCESS)


def _clear(config: GlobalConfig) -> int:
    if clear_cache(config):
        print(f"Removed cache file {config.cache_file}")
    else:
        print("No cache file to remove.")
    return int(ExitCode.SUCCESS)


_HANDLERS = {
    "list": _print_repos,
    "scan": _scan,
    "info": _info,
    "clear-cache": _clear,
}


def run_command(namespace: argparse.Namespace, *, runner: SubprocessRunner = subprocess.run) -> int:
    config = load_config(runner=runner, basedir=namespace.basedir, cache_file=namespace.cache_file)
    return _HANDLERS[namespace.command](config)


def main(
    argv: Sequence[str] | None = None,
    *,
    runner: SubprocessRunner = subprocess.run,
) -> int:
    log_path = default_log_path()
    logger = configure_logging("WARN", log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    try:
        logger.debug("Running command=%s", namespace.command)
        return run_command(namespace, runner=runner)
    except GitGlobalError as exc:
        logger.error(
            "Handled GitGlobalError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
