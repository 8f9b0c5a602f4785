"""Configuration helpers: data directory discovery and settings."""

import logging
import os
import pathlib
import sys

DEFAULT_SETTINGS = {"scheduler": "sm2", "session_limit": 0, "log_level": "WARNING"}


def get_sr_dir() -> pathlib.Path:
    env_dir = os.environ.get("FLASHSR_DIR")
    if env_dir:
        print(f"Using FLASHSR_DIR={env_dir}", file=sys.stderr)
        return pathlib.Path(env_dir)
    config_path = pathlib.Path.home() / ".config" / "flashsr" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip()).expanduser()
    return pathlib.Path.home() / ".local" / "share" / "flashsr"


def load_settings(sr_dir: pathlib.Path) -> dict:
    settings_path = sr_dir / "settings.toml"
    settings = dict(DEFAULT_SETTINGS)
    if settings_path.exists():
        settings.update(_parse_toml_simple(settings_path.read_text()))
    _check_settings(settings, settings_path)
    return settings


def _check_settings(settings: dict, settings_path: pathlib.Path):
    """Normalize known settings in place. Raises ValueError on bad values."""
    limit = settings["session_limit"]
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f"{settings_path}: session_limit must be a whole number >= 0, got {limit!r}")
    level = str(settings["log_level"]).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{settings_path}: unknown log_level {settings['log_level']!r}")
    settings["log_level"] = level


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif (v[1:] if v.startswith("-") else v).isdigit():
                v = int(v)
            elif v == "true":
                v = True
            elif v == "false":
                v = False
            result[k] = v
    return result
