"""Scoped redirection of the process's standard streams onto a pty device.

The process-wide descriptors 0, 1 and 2 are rebound with ``os.dup2`` so child
processes inherit the device, and ``sys.stdin``/``sys.stdout``/``sys.stderr``
are rebound to text wrappers over those descriptors so Python-level writes
land there too. Restoration runs on every exit path.

Nothing in here logs: while the streams are redirected a log record would be
written into the captured output.
"""

from __future__ import annotations

import errno
import fcntl
import os
import sys
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, TextIO, TypeVar

T = TypeVar("T")

STREAM_FDS = (0, 1, 2)


@dataclass
class Outcome(Generic[T]):
    """Either the value returned by a unit of work or the failure it raised."""

    value: T | None = None
    error: BaseException | None = None

    @classmethod
    def capture(cls, unit_of_work: Callable[[], T]) -> Outcome[T]:
        # Everything is captured, SystemExit and KeyboardInterrupt included:
        # the process must not unwind while its streams point at the device.
        try:
            return cls(value=unit_of_work())
        except BaseException as exc:
            return cls(error=exc)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Return the value, or re-raise the captured failure unchanged."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


@dataclass
class SavedStreams:
    """Snapshot of the standard stream bindings taken at scope entry."""

    fds: dict[int, int | None] = field(default_factory=dict)
    stdin: TextIO | None = None
    stdout: TextIO | None = None
    stderr: TextIO | None = None
    # Wrappers installed over the device for the duration of the scope.
    rebound: list[TextIO] = field(default_factory=list)

    @classmethod
    def save(cls) -> SavedStreams:
        saved = cls(stdin=sys.stdin, stdout=sys.stdout, stderr=sys.stderr)
        _flush(sys.stdout)
        _flush(sys.stderr)
        for fd in STREAM_FDS:
            try:
                # Above 2, so a closed standard descriptor is not reused for the copy.
                saved.fds[fd] = fcntl.fcntl(fd, fcntl.F_DUPFD_CLOEXEC, 3)
            except OSError as exc:
                if exc.errno != errno.EBADF:
                    saved.close()
                    raise
                # The process started without this descriptor.
                saved.fds[fd] = None
        return saved

    def restore(self) -> None:
        """Rebind the saved streams and release the duplicated descriptors.

        The rebound wrappers are flushed and closed while the descriptors still
        point at the device, so buffered output never reaches the saved streams.
        """
        for stream in self.rebound:
            # The work may have closed the descriptor underneath the wrapper.
            with suppress(OSError, ValueError):
                stream.close()
        self.rebound.clear()
        sys.stdin, sys.stdout, sys.stderr = self.stdin, self.stdout, self.stderr
        try:
            for fd, saved_fd in self.fds.items():
                if saved_fd is None:
                    with suppress(OSError):
                        os.close(fd)
                else:
                    os.dup2(saved_fd, fd)
        finally:
            self.close()

    def close(self) -> None:
        for saved_fd in self.fds.values():
            if saved_fd is not None:
                os.close(saved_fd)
        self.fds.clear()


def _flush(stream: TextIO | None) -> None:
    if stream is not None and not getattr(stream, "closed", False):
        stream.flush()


def _encoding_of(stream: TextIO | None) -> str:
    return getattr(stream, "encoding", None) or "utf-8"


def _rebind(device_fd: int, saved: SavedStreams) -> None:
    for fd in STREAM_FDS:
        os.dup2(device_fd, fd)
    stdin = open(0, "r", encoding=_encoding_of(saved.stdin), errors="replace", closefd=False)
    saved.rebound.append(stdin)
    stdout = open(1, "w", encoding=_encoding_of(saved.stdout), buffering=1, closefd=False)
    saved.rebound.append(stdout)
    stderr = open(2, "w", encoding=_encoding_of(saved.stderr), buffering=1, closefd=False)
    saved.rebound.append(stderr)
    sys.stdin, sys.stdout, sys.stderr = stdin, stdout, stderr


@contextmanager
def redirected(device_fd: int) -> Iterator[SavedStreams]:
    """Bind stdin, stdout and stderr to ``device_fd`` for the ``with`` body.

    Scopes nest: an inner scope snapshots whatever the descriptors point at
    on entry, which may be an outer scope's device, and restores exactly that.
    """
    saved = SavedStreams.save()
    try:
        _rebind(device_fd, saved)
        yield saved
    finally:
        saved.restore()


def run_scoped(device_fd: int, unit_of_work: Callable[[], T]) -> T:
    """Run ``unit_of_work`` with the standard streams bound to ``device_fd``.

    Any failure raised by the work is held until the original streams are
    back in place, then re-raised as the same exception object. If restoring
    the streams fails as well, the work's failure is still the one raised,
    with the restore error as its context.
    """
    outcome: Outcome[T] | None = None
    try:
        with redirected(device_fd):
            outcome = Outcome.capture(unit_of_work)
    except BaseException:
        if outcome is not None and outcome.error is not None:
            raise outcome.error
        raise
    return outcome.unwrap()
