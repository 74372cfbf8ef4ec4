"""Tests for the command-line filter mode and argument handling."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazypicker import cli


class CliFilterTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.config_path = self.tmp / "config.json"
        self.input_path = self.tmp / "candidates.txt"
        self.input_path.write_text("apple\nbanana\ngrape\n", encoding="utf-8")
        patcher = mock.patch("lazypicker.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout, mock.patch(
            "sys.stderr", new_callable=io.StringIO
        ) as stderr:
            code = cli.main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_filter_prints_ranked_matches(self) -> None:
        code, out, _err = self._run("--input", str(self.input_path), "--filter", "ap")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(out, "apple\ngrape\n")

    def test_filter_reads_stdin(self) -> None:
        with mock.patch("sys.stdin", io.StringIO("one\ntwo\nthree\n")):
            code, out, _err = self._run("--filter", "t")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(sorted(out.splitlines()), ["three", "two"])

    def test_only_newlines_separate_candidates(self) -> None:
        with mock.patch("sys.stdin", io.StringIO("page\x0cbreak\nother line\r\nx\n")):
            code, out, _err = self._run("--filter", "")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(out, "page\x0cbreak\nother line\nx\n")

    def test_input_file_keeps_form_feeds_and_strips_crlf(self) -> None:
        self.input_path.write_bytes(b"page\x0cbreak\r\nplain\r\nlast")

        self.assertEqual(cli.read_candidates(self.input_path), ["page\x0cbreak", "plain", "last"])

    def test_split_lines_edge_cases(self) -> None:
        self.assertEqual(cli.split_lines(""), [])
        self.assertEqual(cli.split_lines("\n"), [""])
        self.assertEqual(cli.split_lines("a\n\nb"), ["a", "", "b"])

    def test_filter_without_matches_exits_one(self) -> None:
        code, out, _err = self._run("--input", str(self.input_path), "--filter", "zzz")

        self.assertEqual(code, cli.EXIT_NO_MATCH)
        self.assertEqual(out, "")

    def test_reverse_flag(self) -> None:
        code, out, _err = self._run("--input", str(self.input_path), "--filter", "ap", "--reverse")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(out, "grape\napple\n")

    def test_unknown_color_is_rejected(self) -> None:
        code, _out, err = self._run("--input", str(self.input_path), "--filter", "a", "--match-color", "chartreuse")

        self.assertEqual(code, cli.EXIT_ERROR)
        self.assertIn("chartreuse", err)

    def test_missing_input_file(self) -> None:
        code, _out, err = self._run("--input", str(self.tmp / "nope.txt"), "--filter", "a")

        self.assertEqual(code, cli.EXIT_ERROR)
        self.assertIn("lazypicker:", err)

    def test_save_config_persists_options(self) -> None:
        code, _out, _err = self._run(
            "--input", str(self.input_path), "--filter", "a", "--case-sensitive", "--match-color", "yellow", "--save-config"
        )

        self.assertEqual(code, cli.EXIT_OK)
        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertTrue(saved["options"]["case_sensitive"])
        self.assertEqual(saved["match_color"], "yellow")

    def test_log_file_receives_debug_records(self) -> None:
        log_path = self.tmp / "picker.log"
        code, _out, _err = self._run(
            "--input", str(self.input_path), "--filter", "ap", "--log-file", str(log_path), "--debug"
        )
        for handler in list(cli.logging.getLogger("lazypicker").handlers):
            handler.close()
            cli.logging.getLogger("lazypicker").removeHandler(handler)
        cli.logging.getLogger("lazypicker").setLevel(cli.logging.NOTSET)

        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("query='ap'", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
