"""Parallel filter passes with generation-stamped publication.

A pass snapshots the corpus, fans the scorer out over fixed-size chunks on a
thread pool, ranks the survivors, and publishes the assembled list. Each pass
takes its generation when it starts; ``publish`` refuses any list older than
the one already published or computed against a replaced corpus, so the
last query issued always wins without interrupting in-flight work.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from .items import ItemStore
from .options import FinderOptions
from .scoring import Scorer, make_scorer, resolve_case_sensitive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    item_id: int
    score: int
    matched_positions: tuple[int, ...] = ()


@dataclass(frozen=True)
class FilteredList:
    query: str
    generation: int
    corpus_generation: int
    results: tuple[MatchResult, ...] = ()
    _index: dict[int, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.results)

    def index_of(self, item_id: int) -> int | None:
        """Return the row holding ``item_id``, or ``None`` when it was filtered out."""
        if not self._index and self.results:
            self._index.update((result.item_id, row) for row, result in enumerate(self.results))
        return self._index.get(item_id)


EMPTY_LIST = FilteredList(query="", generation=0, corpus_generation=0)


def rank_key(result: MatchResult) -> tuple[int, int]:
    return (-result.score, result.item_id)


def score_chunk(scorer: Scorer, query: str, texts: Sequence[str], start: int) -> list[MatchResult]:
    """Score one contiguous slice of the corpus; ids are ``start + offset``."""
    matches: list[MatchResult] = []
    for offset, text in enumerate(texts):
        scored = scorer(query, text)
        if scored is None:
            continue
        score, positions = scored
        matches.append(MatchResult(start + offset, score, tuple(positions)))
    return matches


class FilterEngine:
    """Runs filter passes over an ``ItemStore`` and keeps the published list."""

    def __init__(
        self,
        store: ItemStore,
        options: FinderOptions | None = None,
        *,
        scorer: Scorer | None = None,
    ) -> None:
        self.store = store
        self._options = options or FinderOptions()
        self._scorer = scorer
        self._lock = threading.Lock()
        self._last_generation = 0
        self._published = EMPTY_LIST
        self._pool: ThreadPoolExecutor | None = None
        self._pool_workers = 0
        self._retired: list[ThreadPoolExecutor] = []
        self._background: ThreadPoolExecutor | None = None

    @property
    def options(self) -> FinderOptions:
        return self._options

    @property
    def published(self) -> FilteredList:
        return self._published

    def configure(self, options: FinderOptions) -> None:
        """Apply a new policy to passes started after this call."""
        self._options = options

    def _allocate_generation(self) -> int:
        with self._lock:
            self._last_generation += 1
            return self._last_generation

    def _scorer_for(self, query: str, options: FinderOptions) -> Scorer:
        if self._scorer is not None:
            return self._scorer
        return make_scorer(resolve_case_sensitive(query, options.case_sensitive, options.smart_case))

    def _fan_out_pool(self, workers: int) -> ThreadPoolExecutor:
        with self._lock:
            if self._pool is None or self._pool_workers != workers:
                if self._pool is not None:
                    # Passes already holding the old pool may still submit chunks to it.
                    self._retired.append(self._pool)
                self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="lazypicker-score")
                self._pool_workers = workers
            return self._pool

    def _score_all(self, scorer: Scorer, query: str, texts: tuple[str, ...], options: FinderOptions) -> list[MatchResult]:
        chunk_size = options.chunk_size
        workers = options.workers
        if workers == 1 or len(texts) <= chunk_size:
            return score_chunk(scorer, query, texts, 0)

        pool = self._fan_out_pool(workers)
        futures = [
            pool.submit(score_chunk, scorer, query, texts[start : start + chunk_size], start)
            for start in range(0, len(texts), chunk_size)
        ]
        matches: list[MatchResult] = []
        for future in futures:
            matches.extend(future.result())
        return matches

    def run_pass(self, query: str, generation: int | None = None) -> FilteredList:
        """Compute a ranked list for ``query`` without publishing it."""
        if generation is None:
            generation = self._allocate_generation()
        snapshot = self.store.snapshot()
        options = self._options
        started = time.perf_counter()

        if not query:
            results = tuple(MatchResult(item_id, 0) for item_id in range(len(snapshot)))
        else:
            scorer = self._scorer_for(query, options)
            matches = self._score_all(scorer, query, snapshot.texts, options)
            matches.sort(key=rank_key)
            results = tuple(matches)
        if options.reverse_order:
            results = results[::-1]

        logger.debug(
            "pass %d query=%r corpus=%d items=%d matches=%d in %.1fms",
            generation,
            query,
            snapshot.generation,
            len(snapshot),
            len(results),
            (time.perf_counter() - started) * 1000.0,
        )
        return FilteredList(
            query=query,
            generation=generation,
            corpus_generation=snapshot.generation,
            results=results,
        )

    def publish(self, filtered: FilteredList) -> bool:
        """Make ``filtered`` current unless a newer pass or corpus superseded it."""
        with self._lock:
            if filtered.generation <= self._published.generation:
                logger.debug(
                    "dropping stale pass %d (published %d)", filtered.generation, self._published.generation
                )
                return False
            if filtered.corpus_generation != self.store.generation:
                logger.debug(
                    "dropping pass %d for replaced corpus %d", filtered.generation, filtered.corpus_generation
                )
                return False
            self._published = filtered
            return True

    def update(self, query: str, generation: int | None = None) -> FilteredList:
        """Run and publish one pass; returns whichever list is current afterwards."""
        filtered = self.run_pass(query, generation)
        if self.publish(filtered):
            return filtered
        return self._published

    def submit(self, query: str) -> Future[FilteredList]:
        """Run ``update`` in the background; the generation is taken now."""
        generation = self._allocate_generation()
        with self._lock:
            if self._background is None:
                self._background = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lazypicker-filter")
            background = self._background
        return background.submit(self.update, query, generation)

    def close(self) -> None:
        with self._lock:
            pools = [pool for pool in (self._background, self._pool, *self._retired) if pool is not None]
            self._pool = None
            self._background = None
            self._retired = []
        for pool in pools:
            pool.shutdown(wait=True)
