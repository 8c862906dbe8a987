"""
Configuration management and loading.

Handles the optional YAML settings file and its environment variable.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml


CONFIG_ENV_VAR = "CLAUDE_TOKEN_MONITOR_CONFIG"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class PathsConfig:
    """Explicit executable locations, used verbatim when set."""
    node: Optional[str] = None
    ccusage: Optional[str] = None


@dataclass(frozen=True)
class MonitorConfig:
    """Complete monitor configuration."""
    paths: PathsConfig = PathsConfig()
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Validate timeout and log level."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {list(LOG_LEVELS)}")


def load_monitor_config(
    path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None
) -> MonitorConfig:
    """Load and validate monitor configuration.

    The file is taken from `path`, then from CLAUDE_TOKEN_MONITOR_CONFIG.
    Without either, defaults are returned.

    Args:
        path: Path to YAML configuration file
        env: Environment to read the config location from (defaults to os.environ)

    Returns:
        Validated MonitorConfig object

    Raises:
        FileNotFoundError: If the named config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    env = os.environ if env is None else env
    path = path or env.get(CONFIG_ENV_VAR)
    if not path:
        return MonitorConfig()

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Monitor config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        return MonitorConfig()
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration file must contain a mapping")

    allowed_top_keys = {'paths', 'timeout_seconds', 'log_level'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    paths = _parse_paths(raw_config.get('paths') or {})

    timeout = raw_config.get('timeout_seconds', DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError("'timeout_seconds' must be a number > 0")

    log_level = raw_config.get('log_level', DEFAULT_LOG_LEVEL)
    if not isinstance(log_level, str):
        raise ValueError("'log_level' must be a string")

    return MonitorConfig(
        paths=paths,
        timeout_seconds=float(timeout),
        log_level=log_level.upper()
    )


def _parse_paths(data: Dict) -> PathsConfig:
    """Parse and validate the `paths` section."""
    if not isinstance(data, dict):
        raise ValueError("'paths' must be a dictionary")

    allowed_keys = {'node', 'ccusage'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in paths: {unknown_keys}")

    for key, value in data.items():
        if value is not None and (not isinstance(value, str) or not value.strip()):
            raise ValueError(f"'paths.{key}' must be a non-empty string")

    return PathsConfig(
        node=data.get('node'),
        ccusage=data.get('ccusage')
    )
