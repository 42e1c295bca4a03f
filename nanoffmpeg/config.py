"""Persistent user configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_MAX_RECENT_FILES = 10

_STRING_FIELDS = {
    "default_output_dir": "default_output_dir",
    "theme": "theme",
    "hw_accel": "hw_accel",
    "ffmpeg_path": "ffmpeg_path",
}
_LIST_FIELDS = {
    "recent_files": "recent_files",
    "favorite_presets": "favorite_presets",
}


@dataclass
class Config:
    """User settings kept between runs."""

    theme: str = "dark"
    recent_files: list[str] = field(default_factory=list)
    hw_accel: str = "auto"
    default_output_dir: str = ""
    favorite_presets: list[str] = field(default_factory=list)
    ffmpeg_path: str = ""

    def save(self) -> None:
        """Write the configuration to disk."""
        config_dir_path().mkdir(parents=True, exist_ok=True)
        config_file_path().write_text(json.dumps(self._to_dict(), indent=2), encoding="utf-8")

    def add_recent_file(self, path: str) -> None:
        """Put a file first in the recent list, without duplicates, keeping ten."""
        others = [f for f in self.recent_files if f != path]
        self.recent_files = [path, *others][:_MAX_RECENT_FILES]

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.default_output_dir:
            data["default_output_dir"] = self.default_output_dir
        data["theme"] = self.theme
        data["recent_files"] = list(self.recent_files)
        if self.favorite_presets:
            data["favorite_presets"] = list(self.favorite_presets)
        data["hw_accel"] = self.hw_accel
        if self.ffmpeg_path:
            data["ffmpeg_path"] = self.ffmpeg_path
        return data


def _config_from_data(data: Any) -> Config:
    config = default_config()
    if data is None:
        return config
    if not isinstance(data, dict):
        raise ValueError("configuration is not a JSON object")
    for key, attribute in _STRING_FIELDS.items():
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"{key} must be a string")
        setattr(config, attribute, value)
    for key, attribute in _LIST_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if value is None:
            setattr(config, attribute, [])
            continue
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"{key} must be a list of strings")
        setattr(config, attribute, list(value))
    return config


def default_config() -> Config:
    """The configuration used when none is saved."""
    return Config()


def load_config() -> Config:
    """Read the saved configuration, or the defaults if it is missing or invalid."""
    try:
        data = json.loads(config_file_path().read_text(encoding="utf-8"))
        return _config_from_data(data)
    except (OSError, ValueError):
        return default_config()


def config_dir_path() -> Path:
    """Directory holding the configuration file."""
    return Path.home() / ".config" / "nano-ffmpeg"


def config_file_path() -> Path:
    """Location of the configuration file."""
    return config_dir_path() / "config.json"