"""
config.py - Configuration management for scriptguard

This module handles loading, validating, and managing configuration for the
scanner and the patch generator.
"""

import copy
import logging
import os
import re
from typing import Any, Dict, List, Optional, cast

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_CONFIG: Dict[str, Any] = {
    "diff": {
        "context_lines": 3,
    },
    "concurrency": {
        "max_workers": 4,
        "timeout_seconds": 30,
    },
    "detector": {
        "extra_untrusted_patterns": [],
    },
    "log_level": "WARNING",
}


class ConfigurationError(Exception):
    """Exception raised for configuration errors"""

    pass


def get_config_paths() -> List[str]:
    """
    Get list of possible config file locations in priority order

    Returns:
        List of config file paths to check
    """
    paths = []

    paths.append(os.path.join(os.getcwd(), "scriptguard.yml"))
    paths.append(os.path.join(os.getcwd(), "scriptguard.yaml"))
    paths.append(os.path.join(os.getcwd(), ".scriptguard.yml"))
    paths.append(os.path.join(os.getcwd(), ".scriptguard.yaml"))

    home_dir = os.path.expanduser("~")
    paths.append(os.path.join(home_dir, ".scriptguard.yml"))
    paths.append(os.path.join(home_dir, ".config", "scriptguard", "config.yml"))

    return paths


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two config dictionaries

    Args:
        base: Base configuration
        override: Configuration to override base

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, override_value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(override_value, dict):
            result[key] = merge_configs(result[key], override_value)
        else:
            result[key] = override_value

    return result


def _positive_int(value: Any, name: str, allow_zero: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"'{name}' must be an integer")
    if value < 0 or (value == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ConfigurationError(f"'{name}' must be a {qualifier} integer")


def _validate_section(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    value = config[section]
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{section}' must be a dictionary")

    for key in value:
        if key not in DEFAULT_CONFIG[section]:
            raise ConfigurationError(f"Unknown configuration option '{section}.{key}'")

    return cast(Dict[str, Any], value)


def _validate_diff(config: Dict[str, Any]) -> None:
    """Validate diff rendering options"""

    if "diff" in config:
        diff = _validate_section(config, "diff")
        if "context_lines" in diff:
            _positive_int(diff["context_lines"], "diff.context_lines", allow_zero=True)


def _validate_concurrency(config: Dict[str, Any]) -> None:
    """Validate worker pool options"""

    if "concurrency" in config:
        concurrency = _validate_section(config, "concurrency")
        if "max_workers" in concurrency:
            _positive_int(concurrency["max_workers"], "concurrency.max_workers")
        if "timeout_seconds" in concurrency:
            timeout = concurrency["timeout_seconds"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigurationError("'concurrency.timeout_seconds' must be a positive number")


def _validate_detector(config: Dict[str, Any]) -> None:
    """Validate detector options"""

    if "detector" in config:
        detector = _validate_section(config, "detector")
        if "extra_untrusted_patterns" in detector:
            patterns = detector["extra_untrusted_patterns"]
            if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
                raise ConfigurationError(
                    "'detector.extra_untrusted_patterns' must be a list of strings"
                )
            for pattern in patterns:
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise ConfigurationError(
                        f"Invalid pattern '{pattern}' in 'detector.extra_untrusted_patterns': {e}"
                    )


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration structure and values"""

    for key in config.keys():
        if key not in DEFAULT_CONFIG:
            raise ConfigurationError(f"Unknown configuration option '{key}'")

    if "log_level" in config and str(config["log_level"]).upper() not in LOG_LEVELS:
        valid = ", ".join(LOG_LEVELS)
        raise ConfigurationError(
            f"Invalid log level '{config['log_level']}'. Must be one of: {valid}"
        )

    _validate_diff(config)
    _validate_concurrency(config)
    _validate_detector(config)


def _read_config_file(config_path: str) -> Optional[Dict[str, Any]]:
    with open(config_path, "r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f)

    if user_config is None:
        return None
    if not isinstance(user_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")
    return cast(Dict[str, Any], user_config)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file or use defaults

    Args:
        config_path: Path to configuration file, or None to auto-detect

    Returns:
        Loaded configuration dictionary

    Raises:
        ConfigurationError: If configuration file is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            user_config = _read_config_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML configuration: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

        if user_config:
            validate_config(user_config)
            config = merge_configs(config, user_config)
    else:
        for path in get_config_paths():
            if not os.path.exists(path):
                continue
            try:
                user_config = _read_config_file(path)
                if user_config:
                    validate_config(user_config)
                    config = merge_configs(config, user_config)
                    logger.debug("Loaded configuration from %s", path)
                    break
            except (yaml.YAMLError, OSError, ConfigurationError) as e:
                logger.warning("Ignoring configuration file %s: %s", path, e)

    return config


def generate_default_config(output_path: Optional[str] = None) -> str:
    """
    Generate default configuration YAML

    Args:
        output_path: Path to save default configuration to, or None to return as string

    Returns:
        Default configuration YAML

    Raises:
        ConfigurationError: If configuration cannot be saved
    """
    default_config_yaml = cast(
        str, yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False)
    )

    if output_path:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

            with open(output_path, "w", encoding="utf-8") as f:
                f.write(default_config_yaml)
        except OSError as e:
            raise ConfigurationError(f"Error saving default configuration: {e}")

    return default_config_yaml
