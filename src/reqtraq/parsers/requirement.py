"""Requirement block parser.

Turns the text of one requirement block, as extracted from a LyX or
Markdown certdoc, into a Req:

    REQ-123-TEST-SYS-001 Title
    Body paragraph.
    SAFETY IMPACT: Impact 1
    RATIONALE: Rationale 1
    PARENTS: REQ-123-TEST-SYS-000

Attribute lines may be Markdown list items ("- Rationale: ...") and
attribute names are matched case-insensitively.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from reqtraq.core.models import Req
from reqtraq.core.patterns import REQ_ID_PATTERN, find_req_ids
from reqtraq.errors import MalformedTitleError

DEFAULT_ATTRIBUTES = ("SAFETY IMPACT", "RATIONALE", "VERIFICATION", "PARENTS")
PARENTS_ATTRIBUTE = "PARENTS"


def _attribute_pattern(names: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(r"\s+".join(re.escape(w) for w in n.split()) for n in names)
    return re.compile(rf"^\s*(?:[-*]\s*)?(?P<name>{alternatives})\s*:\s*(?P<value>.*)$", re.IGNORECASE)


def parse_req(text: str, attribute_names: Iterable[str] = DEFAULT_ATTRIBUTES) -> Req:
    """Parse one requirement block.

    Args:
        text: Block text; its first non-blank line is the title line.
        attribute_names: Names of the attribute fields to recognize.

    Returns:
        A Req with id, title, body, parent_ids and attributes set.

    Raises:
        MalformedTitleError: If the title line has no requirement ID.
    """
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise MalformedTitleError("malformed requirement: empty block")

    title_line = lines[0]
    match = REQ_ID_PATTERN.search(title_line)
    if not match:
        raise MalformedTitleError(f"malformed requirement title: missing ID: {title_line!r}")
    title = (title_line[: match.start()] + " " + title_line[match.end() :]).strip(" \t:-")
    req = Req(id=match.group(0), title=" ".join(title.split()))

    names = [n.upper() for n in attribute_names]
    pattern = _attribute_pattern(names) if names else None
    body: list[str] = []
    for line in lines[1:]:
        attr = pattern.match(line) if pattern else None
        if attr is None:
            body.append(line.rstrip())
            continue
        name = " ".join(attr.group("name").upper().split())
        value = attr.group("value").strip()
        req.attributes[name] = value
        if name == PARENTS_ATTRIBUTE:
            req.parent_ids.extend(find_req_ids(value))

    req.body = "\n".join(body).strip("\n")
    return req
