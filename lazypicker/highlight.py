"""Grapheme-aware match highlighting.

Scorers report matches as character offsets, but a renderer must never split
a user-perceived character (combining sequences, emoji ZWJ sequences, flags).
These helpers lift offsets to grapheme-cluster spans and measure clusters in
terminal columns.
"""

from __future__ import annotations

import bisect
import logging
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

import regex

logger = logging.getLogger(__name__)

GRAPHEME_RE = regex.compile(r"\X")
TAB_WIDTH = 4


class HighlightSpan(NamedTuple):
    """Half-open ``[start, end)`` range of grapheme-cluster indices."""

    start: int
    end: int


@dataclass(frozen=True)
class Section:
    text: str
    matched: bool


def graphemes(text: str) -> list[str]:
    return GRAPHEME_RE.findall(text)


def cluster_starts(text: str) -> list[int]:
    """Character offset where each grapheme cluster of ``text`` begins."""
    return [match.start() for match in GRAPHEME_RE.finditer(text)]


def spans(text: str, matched_positions: Iterable[int]) -> list[HighlightSpan]:
    """Map matched character offsets onto coalesced grapheme-cluster spans."""
    starts = cluster_starts(text)
    text_len = len(text)
    clusters: set[int] = set()
    for pos in matched_positions:
        if not 0 <= pos < text_len:
            logger.warning("dropping match position %d outside %r", pos, text)
            continue
        clusters.add(bisect.bisect_right(starts, pos) - 1)

    out: list[HighlightSpan] = []
    for cluster in sorted(clusters):
        if out and out[-1].end == cluster:
            out[-1] = HighlightSpan(out[-1].start, cluster + 1)
        else:
            out.append(HighlightSpan(cluster, cluster + 1))
    return out


def sections(text: str, highlight_spans: Iterable[HighlightSpan]) -> list[Section]:
    """Split ``text`` into alternating unmatched/matched substrings."""
    clusters = graphemes(text)
    out: list[Section] = []
    cursor = 0
    for span in highlight_spans:
        if span.start > cursor:
            out.append(Section("".join(clusters[cursor : span.start]), False))
        out.append(Section("".join(clusters[span.start : span.end]), True))
        cursor = span.end
    if cursor < len(clusters):
        out.append(Section("".join(clusters[cursor:]), False))
    return out


def cluster_width(cluster: str) -> int:
    """Terminal columns for one grapheme cluster.

    The base character decides the width: combining marks and other zero-width
    code points add nothing, East Asian wide/fullwidth bases take two columns,
    and an emoji presentation selector widens the cluster to two.
    """
    if not cluster:
        return 0
    if cluster == "\t":
        return TAB_WIDTH
    width = 0
    for ch in cluster:
        if unicodedata.combining(ch) or unicodedata.category(ch) in {"Mn", "Me", "Cf"}:
            continue
        width = 2 if unicodedata.east_asian_width(ch) in {"W", "F"} else 1
        break
    if width == 1 and "\ufe0f" in cluster:
        return 2
    return width


def text_width(text: str) -> int:
    return sum(cluster_width(cluster) for cluster in graphemes(text))
