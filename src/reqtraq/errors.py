"""
reqtraq.errors - Exception types raised while parsing certdocs and
building the requirement graph.
"""

from __future__ import annotations

from typing import Optional


class ReqtraqError(Exception):
    """Base class for all reqtraq errors."""


class ParseError(ReqtraqError, ValueError):
    """A certdoc could not be parsed.

    Attributes:
        path: File being parsed, if known.
        line_no: 1-based line number of the offending line, if known.
    """

    def __init__(self, message: str, path: Optional[str] = None, line_no: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.line_no = line_no

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            return f"{self.path}: {message}"
        return message


class StructureMismatchError(ParseError):
    """A LyX \\end_ marker does not close the innermost open element."""


class MalformedTagError(ParseError):
    """A 'req:' opened inside another block, or a '/req' with no opener."""


class MalformedTitleError(ParseError):
    """A requirement title line has zero or several requirement IDs."""


class EncodingError(ParseError):
    """A certdoc is not valid UTF-8."""


class UnknownRequirementTypeError(ReqtraqError, ValueError):
    """The type segment of a requirement ID is not a known document type."""


class RequirementTypeMismatchError(ReqtraqError, ValueError):
    """A requirement's type does not belong in the certdoc it was found in."""


class CertdocNameError(ReqtraqError, ValueError):
    """A file name does not follow the certdoc naming convention."""


class DuplicateIDError(ReqtraqError, ValueError):
    """A requirement ID (or code reference key) is already in the graph."""


class PathResolutionError(ReqtraqError):
    """A file could not be located inside the repository."""
