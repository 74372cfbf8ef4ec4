"""Default fuzzy scorer and the scorer contract consumed by the engine.

A scorer is any pure callable ``(query, text) -> (score, positions) | None``.
``positions`` are strictly increasing character offsets into ``text``; the
result is ``None`` iff the query characters are not an ordered subsequence
of the text. Scorers run concurrently on shared inputs, so they must not
keep mutable state.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

ScoreResult = tuple[int, tuple[int, ...]]
Scorer = Callable[[str, str], "ScoreResult | None"]

BOUNDARY_CHARS = frozenset("/_- .\\:")


@lru_cache(maxsize=64)
def _fold_query(query: str) -> tuple[str, ...]:
    return tuple(ch.casefold() for ch in query)


def _scan_str(hay: str, needles: tuple[str, ...] | str) -> tuple[int, ...] | None:
    # Earliest end via a forward scan, then the latest start ending there.
    idx = -1
    for needle in needles:
        idx = hay.find(needle, idx + 1)
        if idx < 0:
            return None
    positions: list[int] = []
    for needle in reversed(needles):
        idx = hay.rfind(needle, 0, idx + 1)
        positions.append(idx)
        idx -= 1
    positions.reverse()
    return tuple(positions)


def _scan_folded(hay: list[str], needles: tuple[str, ...]) -> tuple[int, ...] | None:
    n = len(hay)
    idx = -1
    for needle in needles:
        idx += 1
        while idx < n and hay[idx] != needle:
            idx += 1
        if idx >= n:
            return None
    positions: list[int] = []
    for needle in reversed(needles):
        while hay[idx] != needle:
            idx -= 1
        positions.append(idx)
        idx -= 1
    positions.reverse()
    return tuple(positions)


def match_positions(query: str, candidate: str, case_sensitive: bool = False) -> tuple[int, ...] | None:
    """Return the earliest-ending match of ``query`` in ``candidate``, tightened backwards.

    The match ends as early as possible and then starts as late as possible
    before that end; a shorter window further right is not searched for.

    Case-insensitive matching folds each character on its own, so offsets
    always index ``candidate`` even when folding changes string length.
    """
    if not query:
        return ()
    if case_sensitive:
        return _scan_str(candidate, query)
    needles = _fold_query(query)
    folded = candidate.casefold()
    if len(folded) == len(candidate) and all(len(needle) == 1 for needle in needles):
        return _scan_str(folded, needles)
    return _scan_folded([ch.casefold() for ch in candidate], needles)


def _is_boundary(candidate: str, idx: int) -> bool:
    if idx == 0:
        return True
    prev = candidate[idx - 1]
    if prev in BOUNDARY_CHARS:
        return True
    return prev.islower() and candidate[idx].isupper()


def score_positions(candidate: str, positions: tuple[int, ...]) -> int:
    """Rank a match: consecutive runs and word starts up, gaps and length down."""
    score = 0
    prev_idx = -1
    run = 0
    for idx in positions:
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if _is_boundary(candidate, idx):
            score += 35
        prev_idx = idx
    score -= len(candidate) // 5
    return score


def fuzzy_indices(query: str, candidate: str, case_sensitive: bool = False) -> ScoreResult | None:
    positions = match_positions(query, candidate, case_sensitive=case_sensitive)
    if positions is None:
        return None
    return score_positions(candidate, positions), positions


def resolve_case_sensitive(query: str, case_sensitive: bool, smart_case: bool) -> bool:
    """Smart case turns on case sensitivity for queries with uppercase letters."""
    if case_sensitive:
        return True
    return smart_case and any(ch.isupper() for ch in query)


def make_scorer(case_sensitive: bool = False) -> Scorer:
    """Bind a case policy into a two-argument scorer."""

    def score(query: str, candidate: str) -> ScoreResult | None:
        return fuzzy_indices(query, candidate, case_sensitive=case_sensitive)

    return score
