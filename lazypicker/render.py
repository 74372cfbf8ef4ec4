"""ANSI rendering of the picker screen.

Consumes ``FuzzyFinder.visible_window`` rows and owns viewport scrolling.
Colors come from ``pygments.console`` so user-facing color names match the
ones pygments accepts on the command line.
"""

from __future__ import annotations

from dataclasses import dataclass

from pygments.console import ansiformat, codes

from .finder import FuzzyFinder, WindowRow
from .highlight import TAB_WIDTH, cluster_width, graphemes

PROMPT = "> "
SELECTED_MARKER = "> "
UNSELECTED_MARKER = "  "
RESET = codes["reset"]


def is_known_color(name: str) -> bool:
    return name in codes and name not in {"reset", ""}


@dataclass
class ListViewport:
    """First visible result row; scrolls just enough to keep the cursor shown."""

    start: int = 0

    def follow(self, position: int | None, height: int, total: int) -> int:
        rows = max(1, height)
        max_start = max(0, total - rows)
        if position is not None:
            if position < self.start:
                self.start = position
            elif position >= self.start + rows:
                self.start = position - rows + 1
        self.start = max(0, min(self.start, max_start))
        return self.start


def _printable(cluster: str) -> str:
    if cluster == "\t":
        return " " * TAB_WIDTH
    if cluster and ord(cluster[0]) < 0x20:
        return "?"
    return cluster


def clip_row(row: WindowRow, max_cols: int) -> list[tuple[str, bool]]:
    """Group the clusters that fit in ``max_cols`` into (text, matched) runs."""
    matched_clusters: set[int] = set()
    for span in row.spans:
        matched_clusters.update(range(span.start, span.end))

    runs: list[tuple[str, bool]] = []
    col = 0
    for idx, cluster in enumerate(graphemes(row.text)):
        shown = _printable(cluster)
        width = TAB_WIDTH if cluster == "\t" else cluster_width(shown)
        if col + width > max_cols:
            break
        col += width
        matched = idx in matched_clusters
        if runs and runs[-1][1] == matched:
            runs[-1] = (runs[-1][0] + shown, matched)
        else:
            runs.append((shown, matched))
    return runs


def render_row(row: WindowRow, width: int, match_color: str) -> str:
    marker = SELECTED_MARKER if row.is_selected else UNSELECTED_MARKER
    budget = max(0, width - len(marker))
    color = f"*{match_color}*" if row.is_selected else match_color
    parts = [ansiformat("*red*", marker) if row.is_selected else marker]
    for text, matched in clip_row(row, budget):
        if matched:
            parts.append(ansiformat(color, text))
        elif row.is_selected:
            parts.append(ansiformat("*white*", text))
        else:
            parts.append(text)
    return "".join(parts)


def build_status_line(matched: int, total: int, loading: bool = False) -> str:
    label = f"  {matched}/{total}"
    if loading:
        label += " …"
    return codes["faint"] + label + RESET


def render_screen(
    finder: FuzzyFinder,
    viewport: ListViewport,
    width: int,
    height: int,
    match_color: str,
    *,
    loading: bool = False,
) -> list[str]:
    """Build every screen row: prompt, status, then the result window."""
    list_rows = max(0, height - 2)
    filtered = finder.filtered
    start = viewport.follow(finder.cursor.position, list_rows, len(filtered.results))
    lines = [
        ansiformat("*cyan*", PROMPT) + finder.query,
        build_status_line(len(filtered.results), len(finder.store), loading),
    ]
    for row in finder.visible_window(start, list_rows):
        lines.append(render_row(row, width, match_color))
    while len(lines) < height:
        lines.append("")
    return lines[:height]
