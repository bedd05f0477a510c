"""Module entrypoint for `python -m gitglobal`."""

from gitglobal.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
