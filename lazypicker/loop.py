"""Interactive picker loop: keys in, frames out.

Large corpora are filtered off the input thread; the loop polls for
published passes between keystrokes so typing never blocks on scoring.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .finder import FuzzyFinder, Selection
from .input import read_key
from .render import ListViewport, render_screen
from .terminal import TerminalController

logger = logging.getLogger(__name__)

ASYNC_FILTER_MIN_ITEMS = 50_000
POLL_INTERVAL_MS = 30

ACCEPT = "accept"
CANCEL = "cancel"


@dataclass
class PickerSession:
    finder: FuzzyFinder
    match_color: str
    viewport: ListViewport = field(default_factory=ListViewport)
    async_min_items: int = ASYNC_FILTER_MIN_ITEMS

    def _set_query(self, query: str) -> None:
        if len(self.finder.store) >= self.async_min_items:
            self.finder.set_query_async(query)
        else:
            self.finder.set_query(query)

    def handle_key(self, key: str, page_rows: int = 10) -> str | None:
        """Apply one key token; returns ``ACCEPT``/``CANCEL`` when the session ends."""
        if key in {"ESC", "CTRL_C"}:
            return CANCEL
        if key == "ENTER":
            return ACCEPT
        if key in {"UP", "CTRL_P"}:
            self.finder.move_cursor(-1)
        elif key in {"DOWN", "CTRL_N", "TAB"}:
            self.finder.move_cursor(1)
        elif key == "PAGE_UP":
            self.finder.move_cursor(-max(1, page_rows))
        elif key == "PAGE_DOWN":
            self.finder.move_cursor(max(1, page_rows))
        elif key == "BACKSPACE":
            if self.finder.query:
                self._set_query(self.finder.query[:-1])
        elif key == "CTRL_U":
            if self.finder.query:
                self._set_query("")
        elif key == "CTRL_W":
            trimmed = self.finder.query.rstrip()
            cut = trimmed.rfind(" ")
            self._set_query(trimmed[: cut + 1] if cut >= 0 else "")
        elif len(key) == 1 and key.isprintable():
            self._set_query(self.finder.query + key)
        return None

    def frame(self, width: int, height: int) -> list[str]:
        return render_screen(
            self.finder,
            self.viewport,
            width,
            height,
            self.match_color,
            loading=self.finder.has_pending_updates,
        )


def run_picker(session: PickerSession, terminal: TerminalController) -> Selection | None:
    """Drive ``session`` until the user accepts or cancels."""
    with terminal.raw_mode():
        while True:
            width, height = terminal.size()
            terminal.draw(session.frame(width, height))
            timeout = POLL_INTERVAL_MS if session.finder.has_pending_updates else None
            key = read_key(terminal.in_fd, timeout_ms=timeout)
            session.finder.poll_updates()
            if not key:
                continue
            outcome = session.handle_key(key, page_rows=max(1, height - 2))
            if outcome == CANCEL:
                logger.debug("picker cancelled")
                return None
            if outcome == ACCEPT:
                # Accept acts on the newest query, not a stale frame.
                while session.finder.has_pending_updates:
                    session.finder.poll_updates(timeout_seconds=0.1)
                return session.finder.selected()
