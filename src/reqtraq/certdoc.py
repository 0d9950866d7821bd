"""
reqtraq.certdoc - Parse certdocs into the requirement graph.

A certdoc's file name tells which requirements it defines: in
123-TEST-100-ORD.lyx, ORD (document number 100) holds the SYS, i.e.
system level, requirements of project 123-TEST.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from reqtraq.core.graph import ReqGraph
from reqtraq.core.models import RequirementLevel
from reqtraq.core.patterns import CERTDOC_PATTERN, DOC_NAME_CONVENTIONS, FILE_TYPE_TO_REQ_TYPE
from reqtraq.errors import (
    CertdocNameError,
    DuplicateIDError,
    ReqtraqError,
    RequirementTypeMismatchError,
)
from reqtraq.parsers.lyx import DEFAULT_BASE_URL, parse_lyx
from reqtraq.parsers.markdown import parse_markdown
from reqtraq.parsers.requirement import DEFAULT_ATTRIBUTES, parse_req
from reqtraq.utilities.git import RepoContext

logger = logging.getLogger(__name__)

CERTDOC_SUFFIXES = (".lyx", ".md")


@dataclass(frozen=True)
class CertdocInfo:
    """What a certdoc file name says about its content.

    Attributes:
        project: Project number (e.g., "123")
        abbrev: Project abbreviation (e.g., "TEST")
        doc_number: Document number (e.g., "100")
        doc_type: Document type (e.g., "ORD")
        req_type: Type of the requirements it defines (e.g., "SYS")
        level: Level of the requirements it defines
    """

    project: str
    abbrev: str
    doc_number: str
    doc_type: str
    req_type: str
    level: RequirementLevel


def certdoc_info(path: Path | str) -> CertdocInfo:
    """Decode a certdoc file name.

    Raises:
        CertdocNameError: If the name does not follow the convention or the
            document does not define requirements.
    """
    stem = Path(path).stem
    match = CERTDOC_PATTERN.fullmatch(stem)
    if not match:
        raise CertdocNameError(f"{path}: not a certdoc name, expected <project>-<abbrev>-<number>-<type>")
    project, abbrev, doc_number, doc_type = match.groups()

    expected_number = DOC_NAME_CONVENTIONS.get(doc_type)
    if expected_number is None:
        raise CertdocNameError(f"{path}: unknown document type {doc_type!r}")
    if expected_number != doc_number:
        raise CertdocNameError(
            f"{path}: document type {doc_type} should have number {expected_number}, not {doc_number}"
        )

    req_type = FILE_TYPE_TO_REQ_TYPE.get(doc_type)
    if req_type is None:
        raise CertdocNameError(f"{path}: documents of type {doc_type} do not define requirements")
    level = RequirementLevel.for_req_type(req_type)
    if level is None:
        raise CertdocNameError(f"{path}: requirement type {req_type} has no level")
    return CertdocInfo(project, abbrev, doc_number, doc_type, req_type, level)


def parse_certdoc(
    path: Path | str,
    sink: TextIO | None = None,
    repo: RepoContext | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> list[str]:
    """Extract the requirement blocks of a certdoc in any supported dialect.

    Args:
        path: The certdoc.
        sink: Receives the rewritten LyX file (discarded if None).
            Markdown certdocs are not rewritten.
        repo: Repository context for LyX links (discovered if None).
        base_url: Root of the published documents.

    Raises:
        CertdocNameError: If the file type is not supported.
        ParseError, UnknownRequirementTypeError, PathResolutionError,
        OSError: From the dialect parser.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".lyx":
        return parse_lyx(path, sink if sink is not None else io.StringIO(), repo=repo, base_url=base_url)
    if suffix == ".md":
        return parse_markdown(path)
    raise CertdocNameError(f"{path}: unsupported certdoc format {suffix!r}")


def parse_certdoc_to_graph(
    path: Path | str,
    graph: ReqGraph,
    sink: TextIO | None = None,
    repo: RepoContext | None = None,
    attribute_names: Iterable[str] = DEFAULT_ATTRIBUTES,
    base_url: str = DEFAULT_BASE_URL,
) -> list[Exception]:
    """Parse a certdoc and add its requirements to the graph.

    A file that fails to parse adds nothing. Requirements that cannot be
    added (wrong type for the document, duplicate ID) are skipped and
    reported while the rest of the file is still added.

    Returns:
        The errors found; empty on success.
    """
    try:
        info = certdoc_info(path)
        blocks = parse_certdoc(path, sink=sink, repo=repo, base_url=base_url)
        reqs = [parse_req(block, attribute_names) for block in blocks]
    except (ReqtraqError, OSError) as e:
        return [e]

    errors: list[Exception] = []
    for position, req in enumerate(reqs):
        if req.req_type() != info.req_type:
            errors.append(
                RequirementTypeMismatchError(
                    f"{path}: requirement {req.id} has type {req.req_type()}, "
                    f"{info.doc_type} documents define {info.req_type} requirements"
                )
            )
            continue
        req.level = info.level
        req.position = position
        try:
            graph.add_req(req, str(path))
        except DuplicateIDError as e:
            errors.append(e)

    logger.info("%s: %d requirements, %d errors", path, len(reqs), len(errors))
    return errors


def find_certdocs(root: Path | str) -> list[Path]:
    """Certdoc files under root, sorted.

    Hidden directories are skipped, as are files whose name does not
    follow the certdoc convention.
    """
    root = Path(root)
    found = []
    for path in root.rglob("*"):
        if path.suffix.lower() not in CERTDOC_SUFFIXES or not path.is_file():
            continue
        if any(part.startswith(".") for part in path.relative_to(root).parts):
            continue
        if CERTDOC_PATTERN.fullmatch(path.stem):
            found.append(path)
    return sorted(found)
