"""Pseudo-terminal output capture.

Work runs with its standard streams bound to the device side of a fresh pty,
so it (and any child process it starts) sees a real terminal. What it wrote is
then drained from the controller side and folded into logical lines.
"""

from ptyblock.pty.drain import PollDrain, SelectDrain, make_drain_policy
from ptyblock.pty.handle import Handle, PtyPair, open_pty
from ptyblock.pty.lines import LineBuffer
from ptyblock.pty.redirect import Outcome, redirected, run_scoped
from ptyblock.pty.session import CaptureSession, CloseOrder, run_captured

__all__ = [
    "CaptureSession",
    "CloseOrder",
    "Handle",
    "LineBuffer",
    "Outcome",
    "PollDrain",
    "PtyPair",
    "SelectDrain",
    "make_drain_policy",
    "open_pty",
    "redirected",
    "run_captured",
    "run_scoped",
]
