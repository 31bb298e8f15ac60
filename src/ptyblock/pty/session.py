"""Capture session: run work on a pty and collect what it printed."""

from __future__ import annotations

import enum
import logging
import platform
import select
import uuid
from typing import Callable, TypeVar

from ptyblock.models import CaptureConfig
from ptyblock.pty.constants import INPUT_SETTLE_TIMEOUT
from ptyblock.pty.drain import DrainPolicy, SelectDrain, drain, make_drain_policy
from ptyblock.pty.echo import echo_suppressed
from ptyblock.pty.handle import PtyPair, open_pty
from ptyblock.pty.redirect import run_scoped

log = logging.getLogger(__name__)

T = TypeVar("T")


class CloseOrder(enum.Enum):
    """When the device side is closed relative to draining the controller."""

    DEVICE_FIRST = "device_first"  # required to ever see EIO on Linux
    AFTER_DRAIN = "after_drain"  # macOS discards unread output once the device closes

    @classmethod
    def resolve(cls, value: CloseOrder | str) -> CloseOrder:
        if isinstance(value, cls):
            return value
        if value == "auto":
            return default_close_order()
        return cls(value)


def default_close_order() -> CloseOrder:
    """Return the close order suited to the running platform."""
    if platform.system() == "Darwin":
        return CloseOrder.AFTER_DRAIN
    return CloseOrder.DEVICE_FIRST


class CaptureSession:
    """A pseudo-terminal that a unit of work believes is its terminal.

    Each session owns its own pty pair, so sessions nest: an inner session
    opened inside an outer session's work redirects the streams away from the
    outer device and hands them back when it finishes.

    Usage::

        with CaptureSession() as session:
            session.run(lambda s: subprocess.run(["ls", "-l"]))
            lines = session.lines()
    """

    def __init__(
        self,
        config: CaptureConfig | None = None,
        *,
        drain_policy: DrainPolicy | str | None = None,
        close_order: CloseOrder | str | None = None,
    ):
        self.config = config or CaptureConfig()
        self.id = uuid.uuid4().hex[:8]

        policy = drain_policy if drain_policy is not None else self.config.drain_policy
        if isinstance(policy, str):
            policy = make_drain_policy(
                policy,
                chunk_size=self.config.chunk_size,
                idle_timeout=self.config.idle_timeout,
                select_timeout=self.config.select_timeout,
            )
        self.drain_policy: DrainPolicy = policy
        self.close_order = CloseOrder.resolve(
            close_order if close_order is not None else self.config.close_order
        )
        if isinstance(policy, SelectDrain) and self.close_order is CloseOrder.AFTER_DRAIN:
            log.warning(
                "capture %s: select drain with after_drain close order "
                "only ends when the select timeout expires",
                self.id,
            )

        self._pair: PtyPair | None = None

    @property
    def pair(self) -> PtyPair:
        if self._pair is None:
            raise RuntimeError(f"capture session {self.id} is not open")
        return self._pair

    def open(self) -> CaptureSession:
        """Allocate the pty pair.

        Raises:
            AllocationError: If the host has no pseudo-terminals left.
        """
        if self._pair is not None:
            raise RuntimeError(f"capture session {self.id} is already open")
        self._pair = open_pty()
        log.debug(
            "capture %s opened (drain=%s, close_order=%s)",
            self.id,
            self.drain_policy.name,
            self.close_order.value,
        )
        return self

    def run(self, work: Callable[[CaptureSession], T]) -> T:
        """Run ``work(self)`` with stdin, stdout and stderr bound to the device.

        Returns what the work returns. A failure raised by the work is
        re-raised once the previous streams are back in place.
        """
        device_fd = self.pair.device.fileno()
        log.debug("capture %s running work", self.id)
        try:
            return run_scoped(device_fd, lambda: work(self))
        finally:
            log.debug("capture %s streams restored", self.id)

    def send_input(self, text: str) -> None:
        """Type ``text`` and a newline into the terminal without echoing it.

        Meant to be called from inside the work, before it reads stdin.
        """
        device_fd = self.pair.device.fileno()
        data = (text + "\n").encode(self.config.encoding)
        with echo_suppressed(device_fd):
            self.pair.controller.write(data)
            # Keep echo off until the line discipline has taken the line.
            select.select([device_fd], [], [], INPUT_SETTLE_TIMEOUT)

    def lines(self) -> list[str]:
        """Drain everything the work wrote and release the pty pair.

        The device is closed before or after draining according to
        ``close_order``; the controller is closed last.
        """
        pair = self.pair
        if self.close_order is CloseOrder.DEVICE_FIRST:
            pair.device.close()
        try:
            lines = drain(pair.controller, self.drain_policy, encoding=self.config.encoding)
        finally:
            pair.close()
        log.debug("capture %s collected %d lines", self.id, len(lines))
        return lines

    def close(self) -> None:
        """Release whatever is still open; safe to call more than once."""
        if self._pair is not None:
            self._pair.close()

    def __enter__(self) -> CaptureSession:
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"CaptureSession(id={self.id}, drain={self.drain_policy.name}, "
            f"close_order={self.close_order.value})"
        )


def run_captured(
    work: Callable[[CaptureSession], object],
    config: CaptureConfig | None = None,
    *,
    drain_policy: DrainPolicy | str | None = None,
    close_order: CloseOrder | str | None = None,
) -> list[str]:
    """Run ``work`` on a fresh pty and return the lines it produced.

    The pty pair is released on every path; a failure raised by the work
    propagates unchanged after the streams have been restored.
    """
    with CaptureSession(config, drain_policy=drain_policy, close_order=close_order) as session:
        session.run(work)
        return session.lines()
