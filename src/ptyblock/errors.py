"""Error types raised by ptyblock."""

from __future__ import annotations


class PtyError(OSError):
    """Base class for pseudo-terminal errors."""


class AllocationError(PtyError):
    """Raised when the host cannot allocate a new pseudo-terminal pair."""


class AlreadyClosed(PtyError):
    """Raised when a pty handle is used after it was closed."""

    def __init__(self, name: str):
        super().__init__(f"pty {name} is already closed")
        self.name = name


class WouldBlock(PtyError):
    """No data is available on the controller right now."""


class EndOfStream(PtyError):
    """The device side is closed and every pending byte has been read."""
