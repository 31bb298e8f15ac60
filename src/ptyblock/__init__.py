"""ptyblock - capture terminal output through a pseudo-terminal."""

from importlib.metadata import PackageNotFoundError, version

from ptyblock.pty import CaptureSession, run_captured

try:
    __version__ = version("ptyblock")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["CaptureSession", "run_captured", "__version__"]
