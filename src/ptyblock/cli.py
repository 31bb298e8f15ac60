"""Command-line interface for ptyblock."""

import argparse
import logging
import os
import shutil
import subprocess
import sys

from ptyblock import __version__
from ptyblock.config import load_config
from ptyblock.demo import demo_work
from ptyblock.pty import CaptureSession
from ptyblock.render import HORIZ_MARGIN, MAX_WIDTH, frame, inner_width, number_lines


def supports_color() -> bool:
    """Return whether ANSI color output should be used."""
    if os.getenv("NO_COLOR") is not None:
        return False
    if os.getenv("TERM", "").lower() == "dumb":
        return False
    return sys.stdout.isatty()


def _default_width() -> int:
    columns = shutil.get_terminal_size().columns
    return min(MAX_WIDTH, columns - 2 * HORIZ_MARGIN)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ptyblock",
        description="Run a command on a pseudo-terminal and show what it printed in a frame",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-n",
        "--number",
        action="store_true",
        help="Prefix captured lines with line numbers",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Show only the last N rows, padding shorter output",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help=f"Frame width in columns (default: terminal width, at most {MAX_WIDTH})",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print captured lines without a frame",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run a walkthrough of nested captures and injected input instead of a command",
    )
    parser.add_argument("command", nargs="?", help="Command to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.demo and not args.command:
        parser.error("a command is required unless --demo is given")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    config = load_config()
    width = args.width or _default_width()

    if args.demo:
        title = "ptyblock demo"

        def work(session: CaptureSession) -> int:
            demo_work(session, text_width=inner_width(width) - 4)
            return 0

    else:
        cmd = [args.command, *args.args]
        title = None

        def work(session: CaptureSession) -> int:
            return subprocess.run(cmd).returncode

    try:
        with CaptureSession(config) as session:
            returncode = session.run(work)
            lines = session.lines()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.number:
        lines = number_lines(lines, inner_width(width))
    if args.plain:
        print("\n".join(lines))
    else:
        print(frame(lines, width, height=args.height, title=title, color=supports_color()))

    if returncode != 0:
        print(f"Error: {args.command} exited with status {returncode}", file=sys.stderr)
        return returncode if returncode > 0 else 128 - returncode
    return 0


def entrypoint() -> None:
    raise SystemExit(main())
