"""Command-line front door for lazypicker.

Reads candidate lines from stdin or a file, then either prints ranked
matches for ``--filter`` or runs the interactive picker on the tty and
prints the chosen line.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import load_match_color, load_options, save_match_color, save_options
from .errors import InvalidInput
from .finder import FuzzyFinder
from .loop import PickerSession, run_picker
from .render import is_known_color
from .terminal import TerminalController

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2
EXIT_CANCELLED = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazypicker",
        description="Fuzzy-select a line from stdin.",
    )
    parser.add_argument("--input", type=Path, help="Read candidates from a file instead of stdin.")
    parser.add_argument("-q", "--query", default="", help="Start with this query.")
    parser.add_argument("-f", "--filter", metavar="QUERY", help="Print matches for QUERY without the interactive UI.")
    parser.add_argument(
        "--case-sensitive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Match letter case exactly.",
    )
    parser.add_argument(
        "--smart-case",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Match case exactly only when the query has uppercase letters.",
    )
    parser.add_argument(
        "--reverse",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="List the weakest matches first.",
    )
    parser.add_argument("--match-color", help="pygments console color for matched characters.")
    parser.add_argument("--save-config", action="store_true", help="Persist the given options as defaults.")
    parser.add_argument("--log-file", type=Path, help="Write logs to this file.")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    return parser


def _configure_logging(log_file: Path | None, debug: bool) -> None:
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("lazypicker")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def split_lines(text: str) -> list[str]:
    r"""Split on ``\n`` only, dropping one trailing ``\r`` per line and a final empty line."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_candidates(source: Path | None) -> list[str]:
    if source is None:
        return split_lines(sys.stdin.read())
    with source.open(encoding="utf-8", errors="replace", newline="") as handle:
        return split_lines(handle.read())


def run_filter(finder: FuzzyFinder, query: str) -> int:
    """Print ranked matches for ``query``; non-zero exit when nothing matches."""
    filtered = finder.set_query(query)
    for result in filtered.results:
        sys.stdout.write(finder.store.get(result.item_id) + "\n")
    return EXIT_OK if filtered.results else EXIT_NO_MATCH


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_file, args.debug)

    overrides = {
        key: value
        for key, value in (
            ("case_sensitive", args.case_sensitive),
            ("smart_case", args.smart_case),
            ("reverse_order", args.reverse),
        )
        if value is not None
    }
    options = load_options().merged(**overrides)
    match_color = args.match_color or load_match_color()
    if not is_known_color(match_color):
        sys.stderr.write(f"lazypicker: unknown color {match_color!r}\n")
        return EXIT_ERROR
    if args.save_config:
        save_options(options)
        save_match_color(match_color)

    try:
        candidates = read_candidates(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"lazypicker: {exc}\n")
        return EXIT_ERROR

    try:
        finder = FuzzyFinder(candidates, options)
    except InvalidInput as exc:
        sys.stderr.write(f"lazypicker: {exc}\n")
        return EXIT_ERROR

    with finder:
        if args.filter is not None:
            return run_filter(finder, args.filter)

        finder.set_query(args.query)
        session = PickerSession(finder=finder, match_color=match_color)
        try:
            with TerminalController.open_tty() as terminal:
                selection = run_picker(session, terminal)
        except OSError as exc:
            sys.stderr.write(f"lazypicker: cannot open terminal: {exc}\n")
            return EXIT_ERROR

    if selection is None:
        return EXIT_CANCELLED
    sys.stdout.write(selection.text + "\n")
    return EXIT_OK
