"""Configuration loading helpers for airport-sync."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigError
from .models import SyncConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "airport_sync.yaml"
HOME_ENV = "AIRPORT_SYNC_HOME"

# Environment variables that override the config file.
ENV_OVERRIDES = {
    "API_URL": "api_url",
    "API_KEY": "api_key",
}


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Configuration file could not be parsed: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if self.project_root is not None:
            root = Path(self.project_root).expanduser()
        elif env_root:
            root = Path(env_root).expanduser()
        else:
            root = Path.cwd()
        root = root.resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()

    def ensure_directories(self) -> None:
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        for extension in CONFIG_EXTENSIONS:
            candidate = self.project_root / f"airport_sync{extension}"
            if candidate.exists():
                return candidate
        return self.project_root / CONFIG_FILENAME

    def env_path(self) -> Path:
        return self.project_root / ".env"


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: SyncConfig | None = None

    def load(self) -> SyncConfig:
        if self._cache is not None:
            return self._cache
        env_path = self.locator.env_path()
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
        path = self.locator.config_path()
        payload = _read_file(path) if path.exists() else {}
        for env_name, field_name in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                payload[field_name] = value
        try:
            config = SyncConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
        self._cache = config.resolve_paths(self.locator.project_root)
        return self._cache


def require_api_key(config: SyncConfig) -> str:
    """Return the API key or fail before any request is made."""

    if config.api_key is None or not config.api_key.get_secret_value():
        raise ConfigError("API_KEY is not set in environment variables.")
    return config.api_key.get_secret_value()


__all__ = [
    "CONFIG_EXTENSIONS",
    "CONFIG_FILENAME",
    "ConfigLocator",
    "ConfigRepository",
    "ENV_OVERRIDES",
    "HOME_ENV",
    "require_api_key",
]
