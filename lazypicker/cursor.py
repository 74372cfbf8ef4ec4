"""Selection cursor that follows item identity across filter passes."""

from __future__ import annotations

from .engine import EMPTY_LIST, FilteredList, MatchResult


def reconcile(previous: MatchResult | None, new_list: FilteredList) -> int | None:
    """Return the row for ``previous`` in ``new_list``.

    Falls back to the first row when the item was filtered out, and to
    ``None`` when ``new_list`` is empty.
    """
    if not new_list.results:
        return None
    if previous is not None:
        row = new_list.index_of(previous.item_id)
        if row is not None:
            return row
    return 0


class SelectionCursor:
    """Highlighted row of the current ``FilteredList``.

    ``position`` is ``None`` exactly when the list is empty, otherwise it
    stays within ``[0, len(results))``.
    """

    def __init__(self, filtered: FilteredList = EMPTY_LIST) -> None:
        self._list = filtered
        self.position: int | None = 0 if filtered.results else None

    @property
    def filtered(self) -> FilteredList:
        """List the cursor currently points into."""
        return self._list

    def reconcile(self, new_list: FilteredList) -> int | None:
        """Move to ``new_list``, keeping the selected item when it still matches."""
        self.position = reconcile(self.select(), new_list)
        self._list = new_list
        return self.position

    def reset(self, new_list: FilteredList) -> None:
        """Adopt ``new_list`` and select its first row, ignoring prior identity."""
        self._list = new_list
        self.position = 0 if new_list.results else None

    def move(self, delta: int) -> int | None:
        """Step ``delta`` rows, wrapping at both ends; no-op on an empty list."""
        count = len(self._list.results)
        if count == 0 or self.position is None:
            return self.position
        self.position = (self.position + delta) % count
        return self.position

    def select(self) -> MatchResult | None:
        """Return the highlighted result, or ``None`` when nothing matches."""
        if self.position is None:
            return None
        return self._list.results[self.position]
