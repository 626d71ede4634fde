"""Configuration loading and parsing."""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

CONFIG_FILENAME = "pzsdev.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'paths': {
        'source': 'game/game.pzs',
        'template': 'puzzlescript/standalone_inlined.txt',
        'output': 'dist/game.html',
        'puzzlescript': 'puzzlescript',
        'editor': 'editor.html',
    },
    'export': {
        'armorgames': False,
        'default_title': 'PuzzleScript Game',
    },
    'server': {
        'host': '127.0.0.1',
        'port': 3000,
        'poll_interval': 0.5,
        'open_browser': True,
    },
    'logging': {
        'level': 'INFO',
        'console': True,
        'file': None,
    },
}

# Entries under paths: that are resolved against the project root
_ROOTED_PATHS = ('source', 'template', 'output', 'puzzlescript')


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and parse configuration file.

    Args:
        config_path: Path to a YAML config file. If None, ./pzsdev.yaml is used
            when present, otherwise the built-in defaults.

    Returns:
        Configuration dictionary with defaults filled in. ``config['root']``
        holds the project root (the config file's directory, or the current
        directory), and relative paths under ``paths`` and
        ``logging.file`` are resolved against it.

    Raises:
        ConfigError: If config file cannot be loaded or parsed
    """
    if config_path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        config_path = candidate if candidate.exists() else None
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

    user_config: Dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}")

        # An empty file is a valid "all defaults" config
        if user_config is None:
            user_config = {}

        if not isinstance(user_config, dict):
            raise ConfigError("Configuration file must contain a YAML dictionary")

    config = _merge(DEFAULT_CONFIG, user_config)

    root = config_path.resolve().parent if config_path is not None else Path.cwd()
    config['root'] = root
    config['config_file'] = config_path.resolve() if config_path is not None else None

    paths = config.get('paths')
    if isinstance(paths, dict):
        for key in _ROOTED_PATHS:
            value = paths.get(key)
            if isinstance(value, (str, Path)) and value:
                paths[key] = (root / Path(value).expanduser()).resolve()

    logging_config = config.get('logging')
    if isinstance(logging_config, dict):
        log_file = logging_config.get('file')
        if isinstance(log_file, (str, Path)) and log_file:
            logging_config['file'] = (root / Path(log_file).expanduser()).resolve()

    return config


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., 'server.port')
        default: Default value if path not found

    Returns:
        Configuration value or default

    Example:
        >>> get_config_value(config, 'export.default_title')
        'PuzzleScript Game'
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
