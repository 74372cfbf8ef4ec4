"""Performance budget tests for filtering, cursor moves, and window rendering.

These tests use synthetic large corpora with conservative time budgets so
regressions are caught without depending on machine-specific microbenchmarks.
"""

from __future__ import annotations

import time
import unittest

from lazypicker.finder import FuzzyFinder
from lazypicker.render import ListViewport, render_screen


def _synthetic_corpus(count: int) -> list[str]:
    return [f"src/pkg_{idx % 97:02d}/module_{idx:06d}/handler_{idx % 13}.py" for idx in range(count)]


class PerformanceBudgetTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.corpus = _synthetic_corpus(100_000)

    def test_incremental_query_budget_large_corpus(self) -> None:
        with FuzzyFinder(self.corpus) as finder:
            start = time.perf_counter()
            for query in ("h", "ha", "han", "hand", "handl"):
                finder.set_query(query)
            elapsed = time.perf_counter() - start

            self.assertEqual(len(finder.results), len(self.corpus))
        self.assertLess(elapsed, 20.0, f"query budget exceeded: {elapsed:.3f}s")

    def test_empty_query_budget_large_corpus(self) -> None:
        with FuzzyFinder(self.corpus) as finder:
            finder.set_query("module")
            start = time.perf_counter()
            finder.clear_query()
            elapsed = time.perf_counter() - start

            self.assertEqual(finder.results[0].item_id, 0)
        self.assertLess(elapsed, 1.0, f"empty query budget exceeded: {elapsed:.3f}s")

    def test_cursor_and_frame_budget_large_result_set(self) -> None:
        with FuzzyFinder(self.corpus) as finder:
            finder.set_query("py")
            viewport = ListViewport()
            start = time.perf_counter()
            for _ in range(200):
                finder.move_cursor(7)
                render_screen(finder, viewport, 120, 40, "brightcyan")
            elapsed = time.perf_counter() - start

        self.assertLess(elapsed, 1.0, f"frame budget exceeded: {elapsed:.3f}s")


if __name__ == "__main__":
    unittest.main()
