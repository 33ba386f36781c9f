"""Single-keypress terminal input.

The terminal is switched to cbreak mode (no line buffering, no echo, no
signal keys) once for the whole session and restored on every exit path,
so the operator's shell is never left in a broken input mode.
"""

import logging
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TextIO

from scoutnav.errors import KeyboardError

logger = logging.getLogger(__name__)

KeyReader = Callable[[], str]


@contextmanager
def open_keyboard(stream: TextIO | None = None) -> Iterator[KeyReader]:
    """Put *stream* (default ``sys.stdin``) in cbreak mode for the block.

    Signal keys are delivered as ordinary input, so Ctrl-C is read as a key
    instead of interrupting the program.

    Yields:
        A callable returning the next key press as a one-character string.

    Raises:
        KeyboardError: If the terminal mode cannot be changed, or when a
            read fails or hits end of input.
    """
    stream = stream if stream is not None else sys.stdin

    try:
        import termios
        import tty
    except ImportError as exc:
        raise KeyboardError("single-key input needs a POSIX terminal") from exc

    try:
        fd = stream.fileno()
        saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        # Ctrl-C / Ctrl-Z arrive as ordinary keys
        mode = termios.tcgetattr(fd)
        mode[tty.LFLAG] &= ~(termios.ISIG | termios.IEXTEN)
        termios.tcsetattr(fd, termios.TCSAFLUSH, mode)
    except (OSError, ValueError, termios.error) as exc:
        raise KeyboardError(f"could not open keyboard: {exc}") from exc

    logger.debug("Keyboard opened on fd %d", fd)

    def read_key() -> str:
        try:
            data = os.read(fd, 1)
        except OSError as exc:
            raise KeyboardError(f"could not read key: {exc}") from exc
        if not data:
            raise KeyboardError("end of input while waiting for a key")
        return data.decode("utf-8", errors="replace")

    try:
        yield read_key
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("Keyboard restored on fd %d", fd)
