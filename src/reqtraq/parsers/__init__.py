"""
reqtraq.parsers - Certdoc dialect parsers and the code reference scanner

Exports:
- parse_lyx / linkify / LyxStack: LyX certdocs
- parse_markdown: Markdown certdocs
- parse_req: requirement block text to Req
- CodeParser / scan_code_refs: @llr/@hlr tags in source files
"""

from reqtraq.parsers.code import CodeParser, scan_code_refs
from reqtraq.parsers.lyx import LyxStack, linkify, parse_lyx
from reqtraq.parsers.markdown import parse_markdown
from reqtraq.parsers.requirement import parse_req

__all__ = [
    "CodeParser",
    "scan_code_refs",
    "LyxStack",
    "linkify",
    "parse_lyx",
    "parse_markdown",
    "parse_req",
]
