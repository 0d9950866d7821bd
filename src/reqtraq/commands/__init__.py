"""
reqtraq.commands - CLI command implementations
"""

from reqtraq.commands import linkify_cmd, list_cmd, validate

__all__ = ["linkify_cmd", "list_cmd", "validate"]
