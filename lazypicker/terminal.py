"""Terminal control for the interactive picker.

Owns raw-mode lifecycle and alternate-screen switching on the controlling
tty, so stdin stays free for candidate input and stdout for the selection.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

TTY_PATH = "/dev/tty"


class TerminalController:
    """Manage raw mode and the alternate screen on the controlling tty."""

    def __init__(self, in_fd: int, out_fd: int) -> None:
        """Capture tty state and bind the input/output file descriptors."""
        self.in_fd = in_fd
        self.out_fd = out_fd
        self._saved_tty_state = termios.tcgetattr(in_fd)

    @classmethod
    @contextlib.contextmanager
    def open_tty(cls, path: str = TTY_PATH):
        """Open the controlling tty read/write and close it on exit."""
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        try:
            yield cls(fd, fd)
        finally:
            os.close(fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.in_fd, termios.TCSAFLUSH)
        # Enter alternate screen and hide cursor.
        os.write(self.out_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Restore the main screen, cursor, and saved tty attributes."""
        # Show cursor and restore the main screen buffer.
        os.write(self.out_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.in_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def size(self) -> tuple[int, int]:
        """Return ``(columns, lines)``, falling back to 80x24."""
        try:
            term = os.get_terminal_size(self.out_fd)
            return term.columns, term.lines
        except OSError:
            term = shutil.get_terminal_size((80, 24))
            return term.columns, term.lines

    def draw(self, lines: list[str]) -> None:
        """Repaint the screen from the top with ``lines``, clearing leftovers."""
        out = ["\x1b[H"]
        for idx, line in enumerate(lines):
            if idx:
                out.append("\r\n")
            out.append(line)
            out.append("\x1b[0m\x1b[K")
        out.append("\x1b[J")
        os.write(self.out_fd, "".join(out).encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that holds TUI mode for the duration of the block."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
