# climb_mate/config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Dict, Optional

from loguru import logger

from .domain import AppPlatform, PlatformProfile, profile_for_platform
from .errors import ConfigError
from .logging_config import normalize_level
from .persistence import DEFAULT_STORE_FILENAME, _atomic_write_json, _read_json
from .playback import PlaybackMode


CONFIG_FILENAME = "config.json"
CONFIG_ENV = "CLIMB_MATE_CONFIG"
DATA_FILE_ENV = "CLIMB_MATE_DATA_FILE"


def default_home() -> str:
    return os.path.join(os.path.expanduser("~"), ".climb_mate")


def default_config_path() -> str:
    return os.environ.get(CONFIG_ENV) or os.path.join(default_home(), CONFIG_FILENAME)


@dataclass
class AppConfig:
    """
    Stored in ~/.climb_mate/config.json (or wherever CLIMB_MATE_CONFIG points).
    """
    data_file: str = ""
    platform: AppPlatform = AppPlatform.WINDOWS
    playback_mode: PlaybackMode = PlaybackMode.PAUSE_ON_MARKER
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.data_file:
            self.data_file = os.path.join(default_home(), DEFAULT_STORE_FILENAME)
        try:
            self.platform = AppPlatform(self.platform)
            self.playback_mode = PlaybackMode(self.playback_mode)
            self.log_level = normalize_level(self.log_level or "INFO")
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def profile(self) -> PlatformProfile:
        return profile_for_platform(self.platform)

    def to_dict(self) -> Dict:
        return {
            "data_file": self.data_file,
            "platform": self.platform.value,
            "playback_mode": self.playback_mode.value,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }

    @staticmethod
    def from_dict(d: Dict) -> "AppConfig":
        return AppConfig(
            data_file=str(d.get("data_file") or ""),
            platform=d.get("platform") or AppPlatform.WINDOWS,
            playback_mode=d.get("playback_mode") or PlaybackMode.PAUSE_ON_MARKER,
            log_level=str(d.get("log_level") or "INFO"),
            log_file=d.get("log_file") or None,
        )


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Loads the app config.

    Missing file -> defaults. Invalid file -> warning + defaults.
    CLIMB_MATE_DATA_FILE overrides data_file either way.
    """
    path = path or default_config_path()
    cfg = AppConfig()
    if os.path.exists(path):
        try:
            data = _read_json(path)
            if not isinstance(data, dict):
                raise ConfigError("config root must be a JSON object")
            cfg = AppConfig.from_dict(data)
        except (OSError, json.JSONDecodeError, ConfigError) as e:
            logger.warning("Ignoring invalid config {}: {}", path, e)
            cfg = AppConfig()

    env_data_file = os.environ.get(DATA_FILE_ENV)
    if env_data_file:
        cfg.data_file = env_data_file
    return cfg


def save_config(cfg: AppConfig, path: Optional[str] = None) -> None:
    _atomic_write_json(path or default_config_path(), cfg.to_dict())
