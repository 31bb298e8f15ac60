"""Drain a pty controller into a LineBuffer.

Pseudo-terminals do not report end-of-stream the same way everywhere, so the
loop is a policy object chosen once per capture session:

* ``PollDrain`` reads until nothing more is available. Used where the device
  stays open while draining (macOS) and there is no EOF to wait for.
* ``SelectDrain`` blocks until readable and reads until the kernel reports
  that the device side is gone (``EIO`` on Linux).
"""

from __future__ import annotations

import logging
import platform
import select
from typing import Protocol

from ptyblock.errors import EndOfStream, WouldBlock
from ptyblock.pty.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_SELECT_TIMEOUT,
)
from ptyblock.pty.handle import Handle
from ptyblock.pty.lines import LineBuffer

log = logging.getLogger(__name__)


class DrainPolicy(Protocol):
    name: str

    def drain(self, controller: Handle, buffer: LineBuffer) -> None: ...


def _wait_readable(controller: Handle, timeout: float | None) -> bool:
    readable, _, _ = select.select([controller.fileno()], [], [], timeout)
    return bool(readable)


class PollDrain:
    """Read until the controller has nothing more to give.

    The "no data" condition ends the loop. A short readiness wait before each
    read covers the kernel's asynchronous hand-off of freshly written bytes
    from the device to the controller.
    """

    name = "poll"

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    ):
        self.chunk_size = chunk_size
        self.idle_timeout = idle_timeout

    def drain(self, controller: Handle, buffer: LineBuffer) -> None:
        reads = 0
        while True:
            if not _wait_readable(controller, self.idle_timeout):
                break
            try:
                chunk = controller.read(self.chunk_size)
            except (WouldBlock, EndOfStream):
                break
            buffer.feed(chunk)
            reads += 1
        log.debug("poll drain finished after %d reads", reads)


class SelectDrain:
    """Block on readiness until the device side reports end-of-stream.

    ``timeout`` bounds each readiness wait. When it expires, something other
    than the closed device (typically a background process that inherited
    it) is keeping the stream open, and the loop gives up with a warning.
    ``None`` waits indefinitely.
    """

    name = "select"

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float | None = DEFAULT_SELECT_TIMEOUT,
    ):
        self.chunk_size = chunk_size
        self.timeout = timeout

    def drain(self, controller: Handle, buffer: LineBuffer) -> None:
        reads = 0
        while True:
            if not _wait_readable(controller, self.timeout):
                log.warning(
                    "pty %s still open after %ss without end-of-stream; stopping drain",
                    controller.name,
                    self.timeout,
                )
                break
            try:
                chunk = controller.read(self.chunk_size)
            except WouldBlock:
                continue
            except EndOfStream:
                break
            buffer.feed(chunk)
            reads += 1
        log.debug("select drain finished after %d reads", reads)


def default_drain_policy_name() -> str:
    """Return the drain policy suited to the running platform."""
    if platform.system() == "Darwin":
        return PollDrain.name
    return SelectDrain.name


def make_drain_policy(
    name: str = "auto",
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    select_timeout: float | None = DEFAULT_SELECT_TIMEOUT,
) -> DrainPolicy:
    """Build a drain policy by name (``"poll"``, ``"select"`` or ``"auto"``)."""
    if name == "auto":
        name = default_drain_policy_name()
    if name == PollDrain.name:
        return PollDrain(chunk_size=chunk_size, idle_timeout=idle_timeout)
    if name == SelectDrain.name:
        return SelectDrain(chunk_size=chunk_size, timeout=select_timeout)
    raise ValueError(f"Unknown drain policy: {name!r}")


def drain(controller: Handle, policy: DrainPolicy, encoding: str = "utf-8") -> list[str]:
    """Drain ``controller`` with ``policy`` and return the finished lines."""
    buffer = LineBuffer(encoding=encoding)
    policy.drain(controller, buffer)
    lines = buffer.finalize()
    log.debug("drained %d lines from pty %s", len(lines), controller.name)
    return lines
