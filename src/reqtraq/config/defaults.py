"""
reqtraq.config.defaults - Built-in configuration values.
"""

from typing import Any, Dict

from reqtraq.parsers.code import DEFAULT_EXTENSIONS
from reqtraq.parsers.lyx import DEFAULT_BASE_URL
from reqtraq.parsers.requirement import DEFAULT_ATTRIBUTES

CONFIG_FILE_NAME = ".reqtraq.toml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "links": {
        "base_url": DEFAULT_BASE_URL,
    },
    "requirements": {
        "attributes": list(DEFAULT_ATTRIBUTES),
    },
    "code": {
        "extensions": list(DEFAULT_EXTENSIONS),
    },
}
