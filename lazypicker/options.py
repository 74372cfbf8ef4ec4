"""Scoring and ordering policy shared by the engine and the finder."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace

from .errors import InvalidInput

DEFAULT_CHUNK_SIZE = 4096
MAX_DEFAULT_WORKERS = 8


def default_max_workers() -> int:
    return max(1, min(MAX_DEFAULT_WORKERS, os.cpu_count() or 1))


@dataclass(frozen=True)
class FinderOptions:
    case_sensitive: bool = False
    smart_case: bool = False
    reverse_order: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_workers: int | None = None

    def __post_init__(self) -> None:
        for name in ("case_sensitive", "smart_case", "reverse_order"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidInput(f"{name} must be a bool")
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int) or self.chunk_size < 1:
            raise InvalidInput("chunk_size must be a positive integer")
        if self.max_workers is not None and (
            isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int) or self.max_workers < 1
        ):
            raise InvalidInput("max_workers must be a positive integer or None")

    @property
    def workers(self) -> int:
        return self.max_workers if self.max_workers is not None else default_max_workers()

    def merged(self, **overrides: object) -> FinderOptions:
        """Return a copy with ``overrides`` applied; unknown keys are rejected."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidInput(f"unknown option(s): {', '.join(unknown)}")
        return replace(self, **overrides)
