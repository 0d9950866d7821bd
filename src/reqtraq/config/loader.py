"""
reqtraq.config.loader - Find, read and merge .reqtraq.toml files.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError

from reqtraq.config.defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Find the nearest .reqtraq.toml in start_path or its parents.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to the configuration file, or None if there is none
    """
    current = Path(start_path).resolve()
    for directory in [current, *current.parents]:
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge override into a copy of base.

    Tables are merged key by key; any other value in override replaces
    the one in base.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load a configuration file merged over the defaults.

    Args:
        config_path: Path to a .reqtraq.toml file

    Returns:
        Configuration dictionary

    Raises:
        ValueError: If the file is not valid TOML
        OSError: If the file cannot be read
    """
    content = Path(config_path).read_text(encoding="utf-8")
    try:
        data = tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e
    return merge_configs(DEFAULT_CONFIG, data)
