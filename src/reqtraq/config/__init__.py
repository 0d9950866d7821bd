"""
reqtraq.config - Configuration loading and defaults
"""

from reqtraq.config.loader import load_config, find_config_file, merge_configs
from reqtraq.config.defaults import DEFAULT_CONFIG

__all__ = [
    "load_config",
    "find_config_file",
    "merge_configs",
    "DEFAULT_CONFIG",
]
