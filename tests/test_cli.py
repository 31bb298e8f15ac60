"""Unit tests for ptyblock.cli."""

import sys
from unittest.mock import MagicMock, patch

import pytest

from ptyblock import __version__
from ptyblock.cli import entrypoint, main, supports_color
from ptyblock.models import CaptureConfig
from ptyblock.pty import run_captured


@pytest.fixture(autouse=True)
def default_config():
    with patch("ptyblock.cli.load_config", return_value=CaptureConfig()) as mock_load:
        yield mock_load


class TestMainCapture:
    def test_prints_framed_output(self, capsys):
        assert main(["--width", "40", "echo", "hello"]) == 0

        out = capsys.readouterr().out
        assert "│ hello" in out
        assert "PTY SCREEN" in out

    def test_plain_output(self, capsys):
        assert main(["--plain", "echo", "hello"]) == 0

        assert capsys.readouterr().out == "hello\n"

    def test_command_arguments_pass_through(self, capsys):
        assert main(["--plain", sys.executable, "-c", "print('a'); print('b')"]) == 0

        assert capsys.readouterr().out == "a\nb\n"

    def test_numbered_output(self, capsys):
        assert main(["--plain", "--number", "--width", "40", "echo", "hello"]) == 0

        assert capsys.readouterr().out.strip() == "1: hello"

    def test_height_limits_rows(self, capsys):
        code = "for i in range(5): print(f'row {i}')"
        assert main(["--height", "2", "--width", "40", sys.executable, "-c", code]) == 0

        out = capsys.readouterr().out
        assert "row 2" not in out
        assert "row 3" in out
        assert "row 4" in out

    def test_uses_loaded_config(self, default_config, capsys):
        default_config.return_value = CaptureConfig(drain_policy="poll", close_order="after_drain")

        assert main(["--plain", "echo", "configured"]) == 0

        assert capsys.readouterr().out == "configured\n"
        default_config.assert_called_once()


class TestMainErrors:
    def test_command_failure_returns_its_status(self, capsys):
        assert main(["--plain", sys.executable, "-c", "raise SystemExit(3)"]) == 3

        assert "exited with status 3" in capsys.readouterr().err

    def test_missing_command_returns_one(self, capsys):
        assert main(["--plain", "definitely-not-a-real-command-xyz"]) == 1

        assert "Error:" in capsys.readouterr().err

    def test_capture_error_returns_one(self, capsys):
        session = MagicMock()
        session.__enter__.side_effect = OSError("no ptys left")
        with patch("ptyblock.cli.CaptureSession", return_value=session):
            assert main(["echo", "hi"]) == 1

        assert "no ptys left" in capsys.readouterr().err


class TestMainDemo:
    def test_demo_runs_nested_capture_and_input(self, capsys):
        assert main(["--demo", "--plain", "--width", "80"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "hi"
        assert "> echo echoed" in lines
        assert "echoed" in lines
        assert any(line.endswith("1: True") for line in lines)
        assert any(line.endswith("2: a") for line in lines)
        assert any(line.endswith("3: b") for line in lines)
        assert lines[-1] == "found input: yo"
        assert "yo" not in lines

    def test_nested_capture_uses_loaded_config(self, capsys):
        config = CaptureConfig(chunk_size=512)
        with (
            patch("ptyblock.cli.load_config", return_value=config),
            patch("ptyblock.demo.run_captured", wraps=run_captured) as nested,
        ):
            assert main(["--demo", "--plain", "--width", "80"]) == 0

        nested.assert_called_once()
        assert nested.call_args.args[1] is config


class TestMainArgparse:
    def test_version_output_contains_version_string(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])

        assert __version__ in capsys.readouterr().out

    def test_no_command_exits_with_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2


class TestSupportsColor:
    def test_returns_false_when_no_color_set(self):
        with patch.dict("os.environ", {"NO_COLOR": "1", "TERM": "xterm-256color"}, clear=True):
            with patch("ptyblock.cli.sys.stdout.isatty", return_value=True):
                assert supports_color() is False

    def test_returns_false_when_term_is_dumb(self):
        with patch.dict("os.environ", {"TERM": "dumb"}, clear=True):
            with patch("ptyblock.cli.sys.stdout.isatty", return_value=True):
                assert supports_color() is False

    def test_returns_true_when_tty_and_color_allowed(self):
        with patch.dict("os.environ", {"TERM": "xterm-256color"}, clear=True):
            with patch("ptyblock.cli.sys.stdout.isatty", return_value=True):
                assert supports_color() is True


class TestEntrypoint:
    def test_entrypoint_exits_with_main_status(self):
        with patch("ptyblock.cli.main", return_value=0):
            with pytest.raises(SystemExit) as exc_info:
                with patch.object(sys, "argv", ["ptyblock", "echo", "hi"]):
                    entrypoint()

        assert exc_info.value.code == 0
