"""Exception types raised by the picker engine.

Every error is a caller contract violation reported at the offending call.
Scorer non-matches and empty selections are ``None``, never exceptions.
"""

from __future__ import annotations


class PickerError(Exception):
    """Base class for lazypicker errors."""


class InvalidInput(PickerError, ValueError):
    """Malformed corpus entry or option value supplied by the caller."""


class NotFound(PickerError, LookupError):
    """Item id unknown to the current corpus generation."""

    def __init__(self, item_id: int, generation: int) -> None:
        super().__init__(f"item {item_id!r} not found in corpus generation {generation}")
        self.item_id = item_id
        self.generation = generation
