"""
fastleng Configuration Management

Layered configuration for loading and reporting defaults.

Usage:
    from fastleng.config import Config, load_config

    config = load_config(Path("fastleng.yaml"))
    interval = config.get("loading.progress_interval", 1000000)

Environment variables override file values:
    FASTLENG_LOADING_PROGRESS_INTERVAL=500000 fastleng reads.fq.gz
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigurationError


ENV_PREFIX = "FASTLENG"


# =============================================================================
# Configuration Paths
# =============================================================================

def get_user_config_dir() -> Path:
    """Get user configuration directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "fastleng"
    return Path.home() / ".config" / "fastleng"


def get_user_config_path() -> Path:
    """Get path to user configuration file."""
    return get_user_config_dir() / "config.yaml"


# =============================================================================
# Default Configuration
# =============================================================================

DEFAULT_CONFIG = {
    "loading": {
        "progress_interval": 1000000,
    },
    "report": {
        # Percentiles reported in addition to N10/N25/N50/N75/N90
        "n_scores": [],
        "indent": 2,
    },
    "plot": {
        "bins": 100,
        "log_scale": False,
    },
}


# =============================================================================
# Configuration Class
# =============================================================================

class Config:
    """
    Configuration manager with dot-notation access.

    Lookup order for a key:
    - Environment variable (FASTLENG_SECTION_KEY)
    - Loaded configuration
    - Defaults
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        defaults: Optional[Dict[str, Any]] = None
    ):
        self._defaults = copy.deepcopy(defaults if defaults is not None else DEFAULT_CONFIG)
        self._config = config or {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated key (e.g., "loading.progress_interval")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        env_key = f"{ENV_PREFIX}_{key.upper().replace('.', '_')}"
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._parse_env_value(env_value)

        value = self._get_nested(self._config, key)
        if value is not None:
            return value

        value = self._get_nested(self._defaults, key)
        if value is not None:
            return value

        return default

    def get_int(self, key: str, minimum: Optional[int] = None) -> int:
        """Get an integer value, raising ConfigurationError on bad input."""
        value = self.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(
                f"Configuration value {key} must be an integer, got {value!r}",
                config_key=key
            )
        if minimum is not None and value < minimum:
            raise ConfigurationError(
                f"Configuration value {key} must be >= {minimum}, got {value}",
                config_key=key
            )
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Dot-separated key
            value: Value to set
        """
        self._set_nested(self._config, key, value)

    def to_dict(self) -> Dict[str, Any]:
        """Get full configuration as dictionary."""
        result = copy.deepcopy(self._defaults)
        self._deep_merge(result, self._config)
        return result

    def _get_nested(self, data: Dict, key: str) -> Any:
        """Get nested value using dot notation."""
        current = data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def _set_nested(self, data: Dict, key: str, value: Any) -> None:
        """Set nested value using dot notation."""
        parts = key.split(".")
        current = data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        # List (comma-separated)
        if "," in value:
            return [self._parse_env_value(v.strip()) for v in value.split(",") if v.strip()]

        return value

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Deep merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# =============================================================================
# Configuration Loading
# =============================================================================

def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping, returning {} for a missing file."""
    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigurationError(
            f"Could not read configuration file {path}: {e}",
            config_file=str(path),
            cause=e
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must contain a mapping",
            config_file=str(path)
        )
    return data


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration from file.

    An explicitly requested file must exist; the default user config is
    optional.

    Args:
        path: Config file path (default: user config)

    Returns:
        Config instance
    """
    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                config_file=str(path)
            )
    else:
        path = get_user_config_path()

    return Config(config=load_yaml_file(path))


