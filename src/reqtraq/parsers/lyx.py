"""LyX certdoc parser.

Finds requirement blocks in .lyx files. A block is the document text
between a Note inset containing only "req:" and a Note inset containing
only "/req":

    \\begin_layout Standard
    \\begin_inset Note Note
    status open

    \\begin_layout Plain Layout
    req:
    \\end_layout

    \\end_inset

    REQ-0-DDLN-SYS-001 Title of the requirement
    \\end_layout
    ...
    (body paragraphs, attributes)
    ...
    \\begin_inset Note Note
    ...
    /req
    ...

While reading, the parser writes a copy of the file in which requirement
IDs referenced in bodies become hyperlinks to the certdoc defining them
and every requirement gets a hypertarget anchor named after its ID.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from reqtraq.core.patterns import DOC_NAME_PER_REQ_TYPE, REQ_ID_PATTERN, find_req_ids
from reqtraq.errors import (
    MalformedTagError,
    MalformedTitleError,
    ParseError,
    StructureMismatchError,
    UnknownRequirementTypeError,
)
from reqtraq.utilities.git import RepoContext
from reqtraq.utilities.text import numbered_lines

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://a.daedalean.ai/docs"

REQ_START_PATTERN = re.compile(r"^\s*req:\s*$", re.IGNORECASE)
REQ_END_PATTERN = re.compile(r"^\s*/req\s*$", re.IGNORECASE)

HYPERTARGET_TEMPLATE = """
\\begin_inset ERT
status open

\\begin_layout Plain Layout


\\backslash
hypertarget{{{req_id}}}
\\end_layout

\\end_inset
"""

HREF_TEMPLATE = """
\\begin_inset CommandInset href
LatexCommand href
name "{name}"
target "{target}"

\\end_inset

"""


@dataclass(frozen=True)
class LyxState:
    """An open \\begin_ element.

    Attributes:
        line_no: Line on which the element was opened.
        element: layout, inset, preamble, ...
        arg: First token after the begin marker (e.g. "Note", "Standard").
    """

    line_no: int
    element: str
    arg: str


_NO_STATE = LyxState(0, "", "")


def _element_name(line: str, marker: str) -> str:
    rest = line[len(marker) :]
    return rest.split(" ", 1)[0]


class LyxStack:
    """Stack of the \\begin_ ... \\end_ pairs open at the current line."""

    def __init__(self) -> None:
        self._states: list[LyxState] = []

    def __len__(self) -> int:
        return len(self._states)

    def push(self, line_no: int, line: str, arg: str) -> None:
        self._states.append(LyxState(line_no, _element_name(line, "\\begin_"), arg))

    def pop(self, line_no: int, line: str) -> LyxState:
        """Close the innermost element.

        Raises:
            StructureMismatchError: If line ends a different element than
                the innermost open one.
        """
        element = _element_name(line, "\\end_")
        top = self.top()
        if top.element != element:
            if top is _NO_STATE:
                raise StructureMismatchError(
                    f"lyx file malformed: end {element} line {line_no} has no begin",
                    line_no=line_no,
                )
            raise StructureMismatchError(
                f"lyx file malformed: begin {top.element} line {top.line_no} "
                f"ended by end {element} line {line_no}",
                line_no=line_no,
            )
        return self._states.pop()

    def top(self) -> LyxState:
        if self._states:
            return self._states[-1]
        return _NO_STATE

    def in_note_layout(self) -> bool:
        """True when the innermost element is a layout inside a Note inset."""
        if len(self._states) < 2:
            return False
        outer, inner = self._states[-2], self._states[-1]
        return outer.element == "inset" and outer.arg == "Note" and inner.element == "layout"


def linkify(line: str, repo: str, dir_in_repo: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Replace each requirement ID in line with a LyX href inset.

    The link points to the PDF of the certdoc defining the requirement,
    e.g. REQ-0-DDLN-SYS-006 links to
    <base_url>/<repo>/<dir_in_repo>/0-DDLN-100-ORD.pdf#REQ-0-DDLN-SYS-006.
    Text around the IDs is kept verbatim.

    Raises:
        UnknownRequirementTypeError: If an ID has a type with no certdoc.
    """
    out: list[str] = []
    parsed_to = 0
    for match in REQ_ID_PATTERN.finditer(line):
        out.append(line[parsed_to : match.start()])
        parsed_to = match.end()
        req_id = match.group(0)
        number_abbrev = f"{match.group(1)}-{match.group(2)}"
        req_type = match.group(3)
        doc_type = DOC_NAME_PER_REQ_TYPE.get(req_type)
        if doc_type is None:
            raise UnknownRequirementTypeError(f"unknown requirement type: {req_type!r} (in {req_id!r})")
        name = f"{number_abbrev}-{doc_type}"
        url = f"{base_url}/{repo}/{dir_in_repo}/{name}.pdf#{req_id}"
        out.append(HREF_TEMPLATE.format(name=req_id, target=url))
    out.append(line[parsed_to:])
    return "".join(out)


class _BlockBuffer:
    """Text of the requirement block being collected."""

    def __init__(self, start_line: int) -> None:
        self.start_line = start_line
        self.req_id = ""
        self._buf = io.StringIO()

    @property
    def has_title(self) -> bool:
        return bool(self.req_id)

    def getvalue(self) -> str:
        return self._buf.getvalue()

    def write(self, text: str) -> None:
        self._buf.write(text)

    def truncate(self, size: int) -> None:
        self._buf.seek(size)
        self._buf.truncate()

    def recover_split_id(self, line: str) -> str:
        """Move a requirement ID wrapped across the line break onto line.

        If the buffer ends with the start of an ID whose rest begins line,
        the partial ID is cut from the buffer and prepended to line. Only
        one split per line is repaired.
        """
        text = self.getvalue()
        count = len(REQ_ID_PATTERN.findall(text))
        count_current = len(REQ_ID_PATTERN.findall(line))
        joined = list(REQ_ID_PATTERN.finditer(text + line))
        if count + count_current >= len(joined):
            return line
        split_at = joined[count].start()
        logger.debug("rejoining requirement ID split across lines: %r + %r", text[split_at:], line)
        self.truncate(split_at)
        return text[split_at:] + line


def parse_lyx(
    path: Path | str,
    sink: TextIO,
    repo: RepoContext | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> list[str]:
    """Extract the requirement blocks of a .lyx certdoc.

    Every line of the file is written to sink followed by a newline,
    rewritten where needed: hyperref is enabled, requirements get an
    anchor, and requirement IDs in bodies become links.

    Args:
        path: The .lyx file.
        sink: Receives the rewritten file.
        repo: Repository the file lives in (default: discovered with git).
        base_url: Root of the published documents.

    Returns:
        Text of each req:/req block, in document order.

    Raises:
        PathResolutionError: If the file is not in the repository.
        ParseError: If the nesting or the req:/req tags are malformed.
        UnknownRequirementTypeError: If a body references an unknown type.
        OSError: If the file cannot be read or sink cannot be written.
    """
    path = Path(path)
    if repo is None:
        repo = RepoContext.discover(path)
    dir_in_repo = repo.dir_in_repo(path)

    reqs: list[str] = []
    state = LyxStack()
    preamble_start = False
    block: _BlockBuffer | None = None
    # IDs whose hypertarget goes into the next layout outside a Note.
    pending_anchors: list[str] = []

    with open(path, encoding="utf-8") as f:
        for line_no, line in numbered_lines(f, str(path)):
            outline = line
            is_text = line != "" and not line.startswith("\\") and not line.startswith("#")
            fields = line.split()
            arg = fields[1] if len(fields) > 1 else ""

            try:
                if line.startswith("\\textclass"):
                    # The preamble, if any, follows.
                    preamble_start = True

                elif preamble_start:
                    preamble_start = False
                    if line.startswith("\\begin_preamble"):
                        state.push(line_no, line, "")

                elif line == "\\use_hyperref false":
                    # Anchors only end up in the PDF with hyperref.
                    outline = "\\use_hyperref true"

                elif state.top().element == "preamble" and line.startswith("\\end_preamble"):
                    state.pop(line_no, line)

                elif line.startswith("\\begin_layout"):
                    in_note = state.top().element == "inset" and state.top().arg == "Note"
                    state.push(line_no, line, arg)
                    if pending_anchors and not in_note:
                        outline += "".join(
                            HYPERTARGET_TEMPLATE.format(req_id=req_id) for req_id in pending_anchors
                        )
                        pending_anchors = []

                elif line.startswith("\\begin_inset"):
                    state.push(line_no, line, arg)

                elif line.startswith("\\end_layout") or line.startswith("\\end_inset"):
                    state.pop(line_no, line)

                elif is_text and state.in_note_layout() and REQ_START_PATTERN.match(line):
                    if block is not None:
                        raise MalformedTagError(
                            f"malformed requirement tag: 'req:' on line {line_no} comes after "
                            f"previous unclosed one at line {block.start_line}",
                            line_no=line_no,
                        )
                    block = _BlockBuffer(line_no)

                elif is_text and state.in_note_layout() and REQ_END_PATTERN.match(line):
                    if block is None:
                        raise MalformedTagError(
                            f"malformed requirement tag: '/req' on line {line_no} "
                            "has no corresponding opening req:",
                            line_no=line_no,
                        )
                    logger.debug("requirement block lines %d-%d", block.start_line, line_no)
                    reqs.append(block.getvalue())
                    block = None

                elif (is_text or line == "") and block is not None and state.top().element != "inset":
                    # Text of the requirement. An empty line ends a LyX paragraph.
                    if line == "":
                        if block.has_title:
                            block.write("\n")
                    elif not block.has_title:
                        req_ids = find_req_ids(line)
                        if not req_ids:
                            raise MalformedTitleError(
                                f"malformed requirement title: missing ID on line {line_no}: {line!r}",
                                line_no=line_no,
                            )
                        if len(req_ids) > 1:
                            raise MalformedTitleError(
                                f"malformed requirement title: too many IDs on line {line_no}: {line!r}",
                                line_no=line_no,
                            )
                        block.req_id = req_ids[0]
                        pending_anchors.append(block.req_id)
                        block.write(line)
                    else:
                        line = block.recover_split_id(line)
                        try:
                            outline = linkify(outline, repo.name, dir_in_repo, base_url)
                        except UnknownRequirementTypeError as e:
                            raise UnknownRequirementTypeError(
                                f"malformed requirement: cannot linkify ID on line {line_no}: "
                                f"{outline!r} because: {e}"
                            ) from e
                        block.write(line)
            except ParseError as e:
                e.path = str(path)
                raise

            sink.write(outline)
            sink.write("\n")

    if block is not None:
        raise MalformedTagError(
            f"malformed requirement tag: 'req:' on line {block.start_line} is never closed",
            path=str(path),
            line_no=block.start_line,
        )

    return reqs
