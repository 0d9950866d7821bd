"""
reqtraq.commands.common - Helpers shared by the CLI commands.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from reqtraq.config.defaults import DEFAULT_CONFIG
from reqtraq.config.loader import find_config_file, load_config


def load_configuration(args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    """Load configuration from file or use defaults."""
    if getattr(args, "config", None):
        config_path = args.config
    else:
        config_path = find_config_file(Path.cwd())

    if config_path and config_path.exists():
        try:
            return load_config(config_path)
        except (OSError, ValueError) as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return None
    return DEFAULT_CONFIG


def print_errors(errors: List[Exception]) -> None:
    """Print collected parse and graph errors to stderr."""
    for error in errors:
        print(f"Error: {error}", file=sys.stderr)
