"""Unit tests for ptyblock.pty.handle."""

import errno
import os
import select
from unittest.mock import patch

import pytest

from ptyblock.errors import AllocationError, AlreadyClosed, EndOfStream, PtyError, WouldBlock
from ptyblock.pty.handle import Handle, open_pty


def _wait_readable(handle: Handle, timeout: float = 2.0) -> bool:
    readable, _, _ = select.select([handle.fileno()], [], [], timeout)
    return bool(readable)


@pytest.fixture()
def pair():
    pair = open_pty()
    yield pair
    pair.close()


class TestOpenPty:
    def test_both_sides_are_open_terminals(self, pair):
        assert os.isatty(pair.controller.fileno())
        assert os.isatty(pair.device.fileno())
        assert not pair.controller.closed
        assert not pair.device.closed

    def test_controller_is_non_blocking(self, pair):
        assert os.get_blocking(pair.controller.fileno()) is False

    def test_descriptors_are_not_inherited(self, pair):
        assert os.get_inheritable(pair.controller.fileno()) is False
        assert os.get_inheritable(pair.device.fileno()) is False

    def test_allocation_failure_raises_allocation_error(self):
        with patch("ptyblock.pty.handle.os.openpty", side_effect=OSError(errno.EAGAIN, "no ptys")):
            with pytest.raises(AllocationError) as exc_info:
                open_pty()
        assert exc_info.value.errno == errno.EAGAIN
        assert isinstance(exc_info.value, PtyError)


class TestReadWrite:
    def test_device_writes_arrive_on_controller(self, pair):
        pair.device.write(b"hello")
        assert _wait_readable(pair.controller)
        assert pair.controller.read(1024) == b"hello"

    def test_controller_writes_arrive_on_device(self, pair):
        pair.controller.write(b"typed\n")
        assert _wait_readable(pair.device)
        assert os.read(pair.device.fileno(), 1024) == b"typed\n"

    def test_empty_controller_would_block(self, pair):
        with pytest.raises(WouldBlock):
            pair.controller.read(1024)

    def test_end_of_stream_once_device_closed(self, pair):
        pair.device.close()
        assert _wait_readable(pair.controller)
        with pytest.raises(EndOfStream):
            pair.controller.read(1024)

    def test_zero_byte_read_is_end_of_stream(self, pair):
        with patch("ptyblock.pty.handle.os.read", return_value=b""):
            with pytest.raises(EndOfStream):
                pair.controller.read(1024)

    def test_other_os_errors_propagate(self, pair):
        with patch("ptyblock.pty.handle.os.read", side_effect=OSError(errno.EBADF, "bad fd")):
            with pytest.raises(OSError) as exc_info:
                pair.controller.read(1024)
        assert not isinstance(exc_info.value, EndOfStream)

    def test_write_loops_over_partial_writes(self, pair):
        written = []

        def _short_write(fd, data):
            written.append(bytes(data[:2]))
            return min(2, len(data))

        with patch("ptyblock.pty.handle.os.write", side_effect=_short_write):
            assert pair.device.write(b"abcde") == 5
        assert written == [b"ab", b"cd", b"e"]


class TestClose:
    def test_double_close_raises(self, pair):
        pair.device.close()
        with pytest.raises(AlreadyClosed):
            pair.device.close()

    def test_closed_handle_rejects_io(self, pair):
        pair.controller.close()
        with pytest.raises(AlreadyClosed):
            pair.controller.read(10)
        with pytest.raises(AlreadyClosed):
            pair.controller.write(b"x")
        with pytest.raises(AlreadyClosed):
            pair.controller.fileno()

    def test_pair_close_skips_closed_sides(self, pair):
        pair.device.close()
        pair.close()
        assert pair.device.closed
        assert pair.controller.closed

    def test_pair_close_is_idempotent(self, pair):
        pair.close()
        pair.close()
        assert pair.controller.closed

    def test_repr_shows_state(self, pair):
        assert "fd=" in repr(pair.device)
        pair.device.close()
        assert "closed" in repr(pair.device)
