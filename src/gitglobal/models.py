"""Repository domain model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True, order=True)
class Repo:
    """A discovered git repository root, identified by its absolute path."""

    path: str

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Repository path must not be empty.")

    @property
    def name(self) -> str:
        return PurePath(self.path).name or self.path

    def __str__(self) -> str:
        return self.path
