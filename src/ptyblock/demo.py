"""Walkthrough of nested captures and injected input."""

from __future__ import annotations

import subprocess
import sys

from ptyblock.pty import CaptureSession, run_captured
from ptyblock.render import number_lines


def _print_command(cmd: list[str]) -> None:
    print(f"> {' '.join(cmd)}")


def _run_command(cmd: list[str]) -> int:
    _print_command(cmd)
    return subprocess.run(cmd).returncode


def demo_work(session: CaptureSession, text_width: int = 72) -> str:
    """Exercise the pty the way a real program would.

    Runs a child process, captures another child in a nested session and
    prints its output numbered, then reads back a line typed into the
    controller. Returns the line that was read.
    """
    print("hi\n")
    _run_command(["echo", "echoed"])

    cmd = [sys.executable, "-c", "import sys; print(sys.stdout.isatty()); print('a\\rb')"]
    print("\nrunning a command in an inner pty:")
    _print_command(cmd)
    inner_lines = run_captured(lambda _inner: subprocess.run(cmd, check=True), session.config)
    print("ran successfully. printing...\n")
    print("\n".join(number_lines(inner_lines, text_width)))

    print("\nwriting input to the controller and reading it back from stdin")
    session.send_input("yo")
    found = sys.stdin.readline().rstrip("\n")
    print(f"found input: {found}")
    return found
