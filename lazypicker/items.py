"""Immutable candidate corpus with stable integer ids.

The corpus is replaced wholesale by ``load``; each replacement bumps the
corpus generation so ids held across a reload can be detected as stale.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Item:
    id: int
    text: str


@dataclass(frozen=True)
class CorpusSnapshot:
    """Read-only view of one corpus generation used by a filter pass."""

    generation: int
    texts: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.texts)

    def items(self) -> Iterable[Item]:
        for item_id, text in enumerate(self.texts):
            yield Item(item_id, text)


def _validate_entry(index: int, entry: object) -> str:
    if not isinstance(entry, str):
        raise InvalidInput(f"entry {index} is {type(entry).__name__}, expected str")
    try:
        entry.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidInput(f"entry {index} is not valid text: {exc.reason}") from exc
    return entry


class ItemStore:
    """Owner of the current corpus generation."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = CorpusSnapshot(generation=0, texts=())

    def load(self, items: Iterable[str]) -> int:
        """Replace the corpus, assigning ids ``0..n-1`` in input order.

        Validation runs before anything is replaced, so a rejected load
        leaves the previous generation in place. Returns the new generation.
        """
        texts = tuple(_validate_entry(idx, entry) for idx, entry in enumerate(items))
        with self._lock:
            generation = self._snapshot.generation + 1
            self._snapshot = CorpusSnapshot(generation=generation, texts=texts)
        logger.debug("loaded corpus generation %d with %d items", generation, len(texts))
        return generation

    def get(self, item_id: int, generation: int | None = None) -> str:
        """Return the text for ``item_id``.

        Raises ``NotFound`` for unknown ids, or when ``generation`` is given and
        the corpus has been replaced since.
        """
        snapshot = self._snapshot
        if generation is not None and generation != snapshot.generation:
            raise NotFound(item_id, generation)
        if isinstance(item_id, bool) or not isinstance(item_id, int) or not 0 <= item_id < len(snapshot.texts):
            raise NotFound(item_id, snapshot.generation)
        return snapshot.texts[item_id]

    def snapshot(self) -> CorpusSnapshot:
        """Return the current corpus generation as an immutable snapshot."""
        with self._lock:
            return self._snapshot

    @property
    def generation(self) -> int:
        """Counter bumped by every ``load``."""
        return self._snapshot.generation

    def __len__(self) -> int:
        return len(self._snapshot.texts)
