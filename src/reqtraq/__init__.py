"""
reqtraq - Requirement tracing for certification documents

Extracts requirements from LyX and Markdown certdocs, links them to
their parents and to the code implementing them, and rewrites LyX
certdocs so requirement references become hyperlinks.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("reqtraq")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed

from reqtraq.core.graph import ReqGraph
from reqtraq.core.models import Req, ReqFilter, RequirementLevel
from reqtraq.certdoc import parse_certdoc, parse_certdoc_to_graph

__all__ = [
    "__version__",
    "Req",
    "ReqFilter",
    "ReqGraph",
    "RequirementLevel",
    "parse_certdoc",
    "parse_certdoc_to_graph",
]
