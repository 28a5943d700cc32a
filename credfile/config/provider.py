"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

import yaml

DEFAULT_CONFIG_DIR = "/etc/credfile"
DEFAULT_USERS_FILE_NAME = "users"
DEFAULT_HASHER = "htpasswd"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class StoreConfig:
    """Users store configuration."""
    users_file: Path
    hasher: str
    watch: bool
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_store_config(self) -> StoreConfig:
        """Get users store configuration."""
        ...


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_store_config(self) -> StoreConfig:
        """Get users store configuration from environment variables."""
        users_file = os.getenv("CREDFILE_USERS_FILE")
        if not users_file:
            config_dir = os.getenv("CREDFILE_CONFIG_DIR", DEFAULT_CONFIG_DIR)
            users_file = os.path.join(config_dir, DEFAULT_USERS_FILE_NAME)

        return StoreConfig(
            users_file=Path(users_file),
            hasher=os.getenv("CREDFILE_HASHER", DEFAULT_HASHER),
            watch=_as_bool(os.getenv("CREDFILE_WATCH", "true")),
            log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )


class YamlConfigProvider:
    """
    YAML file configuration provider.

    Recognized keys (missing keys fall back to the environment):

        files.users: /path/to/users   # or files: {users: ...}
        config_dir: /etc/credfile
        hasher: htpasswd
        watch: true
        log_level: INFO
    """

    def __init__(self, path: Union[str, Path], fallback: Optional[ConfigProvider] = None):
        self.path = Path(path)
        self.fallback = fallback or EnvConfigProvider()

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in settings file {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {self.path} must contain a mapping")
        return data

    def get_store_config(self) -> StoreConfig:
        """Get users store configuration from the settings file."""
        data = self._load()
        defaults = self.fallback.get_store_config()

        users_file = data.get("files.users")
        if users_file is None and isinstance(data.get("files"), dict):
            users_file = data["files"].get("users")
        if users_file is None and data.get("config_dir"):
            users_file = os.path.join(data["config_dir"], DEFAULT_USERS_FILE_NAME)

        return StoreConfig(
            users_file=Path(users_file) if users_file else defaults.users_file,
            hasher=data.get("hasher", defaults.hasher),
            watch=_as_bool(data["watch"]) if "watch" in data else defaults.watch,
            log_level=data.get("log_level", defaults.log_level),
        )
