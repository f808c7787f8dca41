"""Configuration loading: defaults file, system file, user file, environment."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import platformdirs
import toml
from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)

# Separates nested keys in environment overrides: ZIPMETA_ARROW_SOURCE__ZIP_FILENAME
ENV_NESTING_SEPARATOR = "__"


class ConfigLoader:
    """Loads configuration from multiple sources with priority."""

    def __init__(self, app_name: str, config_class: Type[T]) -> None:
        self.app_name = app_name
        self.config_class = config_class

    @property
    def env_prefix(self) -> str:
        return f"{self.app_name.upper().replace('-', '_')}_"

    def load(self, defaults_path: Optional[Path] = None) -> T:
        """Load and validate configuration.

        Later sources win: defaults, system config, user config, environment.

        Args:
            defaults_path: Optional path to defaults.toml file

        Returns:
            Validated configuration object

        Raises:
            ConfigurationError: If a file cannot be read or parsed, or the
                merged values fail validation
        """
        config_dict: Dict[str, Any] = {}
        for path in self._config_paths(defaults_path):
            config_dict = self._deep_merge(config_dict, self._read_toml(path))

        config_dict = self._apply_env_overrides(config_dict)

        try:
            return self.config_class(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def _config_paths(self, defaults_path: Optional[Path]) -> list:
        """Existing config files, lowest priority first."""
        if defaults_path is None:
            defaults_path = Path.cwd() / "config" / "defaults.toml"
        elif not defaults_path.exists():
            raise ConfigurationError(f"Config file not found: {defaults_path}", path=str(defaults_path))

        if os.name == "nt":  # Windows
            system_path = (
                Path(os.environ.get("PROGRAMDATA", "C:\\ProgramData"))
                / self.app_name
                / "config.toml"
            )
        else:  # Linux/Mac
            system_path = Path(f"/etc/{self.app_name}/config.toml")

        user_config_dir = platformdirs.user_config_dir(appname=self.app_name, appauthor=False)
        user_path = Path(user_config_dir) / "config.toml"

        paths = [p for p in (defaults_path, system_path, user_path) if p.exists()]
        logger.debug(f"Config files: {[str(p) for p in paths]}")
        return paths

    def _read_toml(self, path: Path) -> Dict[str, Any]:
        try:
            return toml.load(path)
        except toml.TomlDecodeError as e:
            raise ConfigurationError(f"Malformed config file {path}: {e}", path=str(path)) from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}", path=str(path)) from e

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Override config with environment variables.

        Values stay strings; pydantic coerces them to each field's type.
        """
        prefix = self.env_prefix

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(prefix):
                continue

            # ZIPMETA_ARROW_LOGGING__LEVEL -> logging.level
            key_path = env_key[len(prefix):].lower().split(ENV_NESTING_SEPARATOR)

            current = config
            for part in key_path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[key_path[-1]] = env_value

        return config
