"""Shared pytest fixtures for test isolation helpers."""

import os
from pathlib import Path

import pytest

import ptyblock.config as config_module


@pytest.fixture()
def ptyblock_config_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Redirect ptyblock config paths to a temp directory."""
    config_dir = tmp_path / ".ptyblock"
    config_file = config_dir / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    return config_dir, config_file


@pytest.fixture()
def config_dir(ptyblock_config_paths: tuple[Path, Path]) -> Path:
    return ptyblock_config_paths[0]


@pytest.fixture()
def config_file(ptyblock_config_paths: tuple[Path, Path]) -> Path:
    return ptyblock_config_paths[1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PTYBLOCK_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("PTYBLOCK_"):
            monkeypatch.delenv(name)
