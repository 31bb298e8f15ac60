"""Raw file-descriptor handles for a controller/device pty pair."""

from __future__ import annotations

import errno
import logging
import os
from dataclasses import dataclass

from ptyblock.errors import AllocationError, AlreadyClosed, EndOfStream, WouldBlock

log = logging.getLogger(__name__)


class Handle:
    """One side of a pseudo-terminal, owning a single file descriptor."""

    def __init__(self, fd: int, name: str):
        self._fd = fd
        self.name = name
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def fileno(self) -> int:
        self._check_open()
        return self._fd

    def set_blocking(self, blocking: bool) -> None:
        self._check_open()
        os.set_blocking(self._fd, blocking)

    def read(self, max_bytes: int) -> bytes:
        """Read up to ``max_bytes`` currently available bytes.

        Raises:
            WouldBlock: The handle is non-blocking and nothing is buffered.
            EndOfStream: The peer side is gone. Linux reports this as ``EIO``
                once every device descriptor is closed, BSD-derived systems
                as a zero-byte read.
            AlreadyClosed: The handle was closed.
        """
        self._check_open()
        try:
            data = os.read(self._fd, max_bytes)
        except BlockingIOError as exc:
            raise WouldBlock(exc.errno, f"no data on pty {self.name}") from exc
        except OSError as exc:
            if exc.errno == errno.EIO:
                raise EndOfStream(exc.errno, f"pty {self.name} reached end of stream") from exc
            raise
        if not data:
            raise EndOfStream(0, f"pty {self.name} reached end of stream")
        return data

    def write(self, data: bytes) -> int:
        """Write all of ``data``, looping over partial writes."""
        self._check_open()
        view = memoryview(data)
        while view:
            written = os.write(self._fd, view)
            view = view[written:]
        return len(data)

    def close(self) -> None:
        self._check_open()
        self._closed = True
        os.close(self._fd)
        log.debug("closed pty %s (fd=%d)", self.name, self._fd)

    def _check_open(self) -> None:
        if self._closed:
            raise AlreadyClosed(self.name)

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"fd={self._fd}"
        return f"Handle({self.name}, {state})"


@dataclass
class PtyPair:
    """A controller/device pseudo-terminal pair owned by one capture session."""

    controller: Handle
    device: Handle

    def close(self) -> None:
        """Close every side that is still open."""
        for handle in (self.device, self.controller):
            if not handle.closed:
                handle.close()


def open_pty() -> PtyPair:
    """Allocate a fresh pty pair with a non-blocking controller.

    Raises:
        AllocationError: If the host has no pseudo-terminals left.
    """
    try:
        controller_fd, device_fd = os.openpty()
    except OSError as exc:
        raise AllocationError(exc.errno, f"could not allocate a pty: {exc.strerror}") from exc

    pair = PtyPair(
        controller=Handle(controller_fd, "controller"),
        device=Handle(device_fd, "device"),
    )
    pair.controller.set_blocking(False)
    log.debug("opened pty pair controller=%d device=%d", controller_fd, device_fd)
    return pair
