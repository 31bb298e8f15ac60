"""Terminal echo control for injecting input through the controller."""

from __future__ import annotations

import termios
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def echo_suppressed(fd: int) -> Iterator[None]:
    """Turn off ECHO on the terminal behind ``fd`` for the ``with`` body.

    The previous attributes are restored afterwards, so a terminal that
    already had echo disabled stays that way.
    """
    old_attrs = termios.tcgetattr(fd)
    new_attrs = termios.tcgetattr(fd)
    new_attrs[3] &= ~termios.ECHO
    termios.tcsetattr(fd, termios.TCSANOW, new_attrs)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, old_attrs)


def echo_enabled(fd: int) -> bool:
    return bool(termios.tcgetattr(fd)[3] & termios.ECHO)
