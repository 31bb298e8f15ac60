"""Configuration for ptyblock."""

import json
import logging
import os
import secrets
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ptyblock.models import CaptureConfig

log = logging.getLogger(__name__)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "CaptureConfig",
    "load_config",
    "save_config",
]

CONFIG_DIR = Path.home() / ".ptyblock"
CONFIG_FILE = CONFIG_DIR / "config.json"
DISABLED_STRINGS = {"none", "off"}

# Environment variable -> config field.
ENV_OVERRIDES = {
    "PTYBLOCK_DRAIN_POLICY": "drain_policy",
    "PTYBLOCK_CLOSE_ORDER": "close_order",
    "PTYBLOCK_CHUNK_SIZE": "chunk_size",
    "PTYBLOCK_ENCODING": "encoding",
    "PTYBLOCK_SELECT_TIMEOUT": "select_timeout",
}


def load_config() -> CaptureConfig:
    """Load config from file, with env var overrides.

    Reads ``~/.ptyblock/config.json`` and applies the ``PTYBLOCK_*``
    environment variable overrides.  Falls back to defaults when the file is
    absent or contains invalid JSON or invalid values; an invalid override is
    ignored with a warning.

    Returns:
        The resolved ``CaptureConfig`` instance.
    """
    raw_config: dict[str, Any] = {}

    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE) as f:
                loaded = json.load(f)
        except json.JSONDecodeError as exc:
            log.warning(
                "invalid config JSON in %s (%s); falling back to defaults",
                CONFIG_FILE,
                exc,
            )
        else:
            if isinstance(loaded, dict):
                raw_config = loaded
            log.debug("loaded config from %s", CONFIG_FILE)

    try:
        config = CaptureConfig.model_validate(raw_config)
    except ValidationError as exc:
        log.warning("invalid config in %s (%s); falling back to defaults", CONFIG_FILE, exc)
        config = CaptureConfig()

    for env_var, field_name in ENV_OVERRIDES.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        value: str | None = raw.strip()
        if field_name == "select_timeout" and value.lower() in DISABLED_STRINGS:
            value = None
        try:
            config = CaptureConfig.model_validate(
                {**config.model_dump(), field_name: value}
            )
        except ValidationError:
            log.warning("ignoring invalid %s=%r", env_var, raw)

    return config


def save_config(config: CaptureConfig) -> None:
    """Save config to file.

    Writes ``~/.ptyblock/config.json`` atomically (temp file + rename).

    Args:
        config: Configuration to persist.

    Raises:
        OSError: If the config directory or file cannot be created or written.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    temp_file = CONFIG_DIR / f".{CONFIG_FILE.name}.{os.getpid()}.{secrets.token_hex(8)}.tmp"
    try:
        with open(temp_file, "w") as f:
            json.dump(config.model_dump(), f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_file, CONFIG_FILE)
    except Exception:
        temp_file.unlink(missing_ok=True)
        raise
    log.debug("saved config to %s", CONFIG_FILE)
