"""Tests for terminal mode switching and frame drawing escape sequences."""

from __future__ import annotations

import os
import termios
import unittest
from unittest import mock

from lazypicker.terminal import TerminalController


def _controller() -> TerminalController:
    with mock.patch("lazypicker.terminal.termios.tcgetattr", return_value=[0]):
        return TerminalController(in_fd=0, out_fd=1)


class TerminalControllerTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("lazypicker.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "lazypicker.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("lazypicker.terminal.os.write") as write_mock, mock.patch(
            "lazypicker.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(in_fd=0, out_fd=1)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[?25l"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        controller = _controller()

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()

    def test_draw_homes_cursor_and_clears_each_row(self) -> None:
        controller = _controller()

        with mock.patch("lazypicker.terminal.os.write") as write_mock:
            controller.draw(["> ap", "  apple"])

        self.assertEqual(
            write_mock.call_args.args,
            (1, b"\x1b[H> ap\x1b[0m\x1b[K\r\n  apple\x1b[0m\x1b[K\x1b[J"),
        )

    def test_size_falls_back_when_fd_is_not_a_terminal(self) -> None:
        controller = _controller()

        with mock.patch("lazypicker.terminal.os.get_terminal_size", side_effect=OSError), mock.patch(
            "lazypicker.terminal.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
        ):
            self.assertEqual(controller.size(), (80, 24))


if __name__ == "__main__":
    unittest.main()
