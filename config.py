import logging
import os
import sys

import yaml

from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"
DEFAULT_DB_PATH = "workout_log.db"
DEFAULT_YAML_PATH = "settings.yaml"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class YamlConfig:
    """Load and save settings to a YAML file."""

    def __init__(self, path: str = DEFAULT_YAML_PATH) -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f, allow_unicode=True)


def load_settings(yaml_path: str | None = None) -> SettingsSchema:
    """Read settings from YAML, apply ``LOG_LEVEL`` and validate."""
    path = yaml_path or os.environ.get("YAML_PATH", DEFAULT_YAML_PATH)
    data = YamlConfig(path).load()
    env_level = os.environ.get("LOG_LEVEL")
    if env_level:
        data["log_level"] = env_level
    validate_settings(data)
    return SettingsSchema(**data)


def configure_logging(level: str = "WARNING") -> None:
    """Attach a single stdout handler to the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for handler in root.handlers:
        if getattr(handler, "_workout_log", False):
            handler.setLevel(root.level)
            handler.setStream(sys.stdout)
            return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(root.level)
    handler._workout_log = True
    root.addHandler(handler)
