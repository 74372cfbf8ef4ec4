"""Picker-facing facade tying corpus, engine, cursor, and highlighting together."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import FIRST_COMPLETED, Future, wait
from typing import NamedTuple

from .cursor import SelectionCursor
from .engine import FilteredList, FilterEngine, MatchResult
from .highlight import HighlightSpan, spans
from .items import ItemStore
from .options import FinderOptions
from .scoring import Scorer

logger = logging.getLogger(__name__)


class Selection(NamedTuple):
    item_id: int
    text: str
    score: int


class WindowRow(NamedTuple):
    text: str
    spans: list[HighlightSpan]
    is_selected: bool


class FuzzyFinder:
    """Interactive fuzzy-finder state: corpus, query, ranked list, and cursor.

    ``set_query`` filters inline. ``set_query_async`` offloads the pass and
    ``poll_updates`` adopts whatever the engine published since, so a slow
    pass for an older query never replaces the result of a newer one.
    """

    def __init__(
        self,
        items: Iterable[str] = (),
        options: FinderOptions | None = None,
        *,
        scorer: Scorer | None = None,
    ) -> None:
        self.store = ItemStore()
        self.engine = FilterEngine(self.store, options, scorer=scorer)
        self.cursor = SelectionCursor()
        self._query = ""
        self._pending: list[Future[FilteredList]] = []
        self.load(items)

    @property
    def query(self) -> str:
        return self._query

    @property
    def options(self) -> FinderOptions:
        return self.engine.options

    @property
    def filtered(self) -> FilteredList:
        return self.cursor.filtered

    @property
    def results(self) -> tuple[MatchResult, ...]:
        return self.cursor.filtered.results

    def _apply(self, filtered: FilteredList) -> None:
        current = self.cursor.filtered
        if filtered.corpus_generation == current.corpus_generation and filtered.generation <= current.generation:
            return
        if filtered.corpus_generation != current.corpus_generation:
            # Ids are reassigned on reload, so identity cannot carry over.
            self.cursor.reset(filtered)
        else:
            self.cursor.reconcile(filtered)

    def load(self, items: Iterable[str]) -> None:
        """Replace the corpus and re-filter it with the current query."""
        self.store.load(items)
        self._apply(self.engine.update(self._query))

    def set_query(self, query: str) -> FilteredList:
        self._query = query
        self._apply(self.engine.update(query))
        return self.cursor.filtered

    def clear_query(self) -> FilteredList:
        return self.set_query("")

    def set_query_async(self, query: str) -> Future[FilteredList]:
        self._query = query
        future = self.engine.submit(query)
        self._pending.append(future)
        return future

    def poll_updates(self, timeout_seconds: float = 0.0) -> bool:
        """Adopt the newest published list; returns whether the cursor's list changed.

        Errors raised inside background passes are re-raised here.
        """
        if timeout_seconds > 0 and self._pending:
            wait(self._pending, timeout=timeout_seconds, return_when=FIRST_COMPLETED)
        done = [future for future in self._pending if future.done()]
        self._pending = [future for future in self._pending if not future.done()]
        for future in done:
            future.result()

        published = self.engine.published
        if published.generation <= self.cursor.filtered.generation:
            return False
        self._apply(published)
        return True

    @property
    def has_pending_updates(self) -> bool:
        return bool(self._pending)

    def configure(self, options: FinderOptions | None = None, **overrides: object) -> FilteredList:
        """Change scoring/ordering policy and re-filter the current query."""
        base = options if options is not None else self.engine.options
        self.engine.configure(base.merged(**overrides) if overrides else base)
        return self.set_query(self._query)

    def move_cursor(self, delta: int) -> int | None:
        return self.cursor.move(delta)

    def select_next(self) -> int | None:
        return self.cursor.move(1)

    def select_prev(self) -> int | None:
        return self.cursor.move(-1)

    def selected(self) -> Selection | None:
        result = self.cursor.select()
        if result is None:
            return None
        text = self.store.get(result.item_id, generation=self.cursor.filtered.corpus_generation)
        return Selection(result.item_id, text, result.score)

    def visible_window(self, offset: int, height: int) -> list[WindowRow]:
        """Rows ``[offset, offset + height)`` with grapheme spans for rendering."""
        if height <= 0:
            return []
        filtered = self.cursor.filtered
        start = max(0, offset)
        rows: list[WindowRow] = []
        for row, result in enumerate(filtered.results[start : start + height], start=start):
            text = self.store.get(result.item_id, generation=filtered.corpus_generation)
            rows.append(WindowRow(text, spans(text, result.matched_positions), row == self.cursor.position))
        return rows

    def close(self) -> None:
        self.engine.close()

    def __enter__(self) -> FuzzyFinder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
