"""Configuration validation."""

import logging
from pathlib import Path
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    sections = ['paths', 'export', 'server', 'logging']
    for name in sections:
        if not isinstance(config.get(name, {}), dict):
            errors.append(f"{name} must be a mapping")

    if not errors:
        errors.extend(_validate_paths(config.get('paths', {})))
        errors.extend(_validate_export(config.get('export', {})))
        errors.extend(_validate_server(config.get('server', {})))
        errors.extend(_validate_logging(config.get('logging', {})))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_paths(section: Dict[str, Any]) -> List[str]:
    """Validate paths section."""
    errors = []

    # Existence is checked at export time; a missing source is an export error
    for path_key in ['source', 'template', 'output', 'puzzlescript']:
        value = section.get(path_key)
        if not value:
            errors.append(f"paths.{path_key} is required")
        elif not isinstance(value, (str, Path)):
            errors.append(f"paths.{path_key} must be a path string")

    editor = section.get('editor')
    if not isinstance(editor, str) or not editor:
        errors.append("paths.editor must be a file name")

    return errors


def _validate_export(section: Dict[str, Any]) -> List[str]:
    """Validate export options section."""
    errors = []

    if not isinstance(section.get('armorgames', False), bool):
        errors.append("export.armorgames must be true or false")

    title = section.get('default_title')
    if not isinstance(title, str) or not title.strip():
        errors.append("export.default_title must be a non-empty string")

    return errors


def _validate_server(section: Dict[str, Any]) -> List[str]:
    """Validate dev server section."""
    errors = []

    host = section.get('host')
    if not isinstance(host, str) or not host:
        errors.append("server.host must be a host name or address")

    port = section.get('port')
    if isinstance(port, bool) or not isinstance(port, int):
        errors.append("server.port must be an integer")
    elif port < 1 or port > 65535:
        errors.append("server.port must be between 1 and 65535")

    interval = section.get('poll_interval')
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        errors.append("server.poll_interval must be a number")
    elif interval <= 0:
        errors.append("server.poll_interval must be greater than 0")
    elif interval > 10:
        logger.warning(f"server.poll_interval={interval}s is high, reloads will lag")

    if not isinstance(section.get('open_browser', True), bool):
        errors.append("server.open_browser must be true or false")

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    level = section.get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if not isinstance(section.get('console', True), bool):
        errors.append("logging.console must be true or false")

    log_file = section.get('file')
    if log_file is not None and not isinstance(log_file, (str, Path)):
        errors.append("logging.file must be a path string")

    return errors
