"""Public package surface for lazypicker.

``FuzzyFinder`` is the picker-facing entry point; the engine, cursor, and
highlight modules are usable on their own for custom front ends.
"""

from __future__ import annotations

from .cursor import SelectionCursor
from .engine import FilteredList, FilterEngine, MatchResult
from .errors import InvalidInput, NotFound, PickerError
from .finder import FuzzyFinder, Selection, WindowRow
from .highlight import HighlightSpan, Section, sections, spans
from .items import CorpusSnapshot, Item, ItemStore
from .options import FinderOptions
from .scoring import Scorer, fuzzy_indices, make_scorer


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "CorpusSnapshot",
    "FilterEngine",
    "FilteredList",
    "FinderOptions",
    "FuzzyFinder",
    "HighlightSpan",
    "InvalidInput",
    "Item",
    "ItemStore",
    "MatchResult",
    "NotFound",
    "PickerError",
    "Scorer",
    "Section",
    "Selection",
    "SelectionCursor",
    "WindowRow",
    "fuzzy_indices",
    "main",
    "make_scorer",
    "sections",
    "spans",
]
