"""Markdown certdoc parser.

Requirements in Markdown certdocs are headings starting with their ID:

    ##### REQ-0-DDLN-SYS-001 Title of the requirement
    Body text.

    ###### Attributes:
    - Safety Impact: None
    - Rationale: ...
    - Verification: Test

A requirement runs until the next heading of the same or a higher level,
or until a deeper heading that starts another requirement.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from reqtraq.core.patterns import REQ_ID_PATTERN, find_req_ids
from reqtraq.errors import MalformedTitleError
from reqtraq.utilities.text import numbered_lines

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<text>.*?)\s*#*\s*$")
ATTRIBUTES_HEADING_PATTERN = re.compile(r"^attributes\s*:?$", re.IGNORECASE)


def parse_markdown(path: Path | str) -> list[str]:
    """Extract the requirement blocks of a .md certdoc.

    Each block starts with the heading text (without the leading "#")
    followed by the body lines. "Attributes" sub-headings are dropped;
    their list items are kept.

    Raises:
        MalformedTitleError: If a requirement heading holds more than one ID.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    reqs: list[str] = []
    block: list[str] | None = None
    block_level = 0

    def flush() -> None:
        if block is not None:
            reqs.append("\n".join(block).strip("\n"))

    with open(path, encoding="utf-8") as f:
        for line_no, line in numbered_lines(f, str(path)):
            heading = HEADING_PATTERN.match(line)
            if heading:
                level = len(heading.group("hashes"))
                text = heading.group("text")
                if block is not None and level > block_level and not REQ_ID_PATTERN.match(text):
                    if not ATTRIBUTES_HEADING_PATTERN.match(text):
                        block.append(text)
                    continue

                flush()
                block = None
                if REQ_ID_PATTERN.match(text):
                    if len(find_req_ids(text)) > 1:
                        raise MalformedTitleError(
                            f"malformed requirement title: too many IDs on line {line_no}: {line!r}",
                            path=str(path),
                            line_no=line_no,
                        )
                    logger.debug("requirement heading on line %d: %s", line_no, text)
                    block = [text]
                    block_level = level
                continue

            if block is not None:
                block.append(line)

    flush()
    return reqs
