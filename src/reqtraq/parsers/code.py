"""Code reference parser for source files.

Extracts requirement references from tag comments such as:
- // @llr REQ-0-DDLN-SWL-014
- # @hlr REQ-0-DDLN-SWH-002
- // @tests @llr REQ-0-DDLN-SWL-015

A tag applies to the function or class defined right after it, or to the
whole file when no definition follows.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from reqtraq.core.graph import ReqGraph, code_ref_key
from reqtraq.core.patterns import find_req_ids

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".c", ".cc", ".cpp", ".h", ".hh", ".hpp", ".go", ".py")


class CodeParser:
    """Parser for source files with requirement tags."""

    TAG_PATTERN = re.compile(
        r"^\s*(?://+|#+|/?\*+)\s*(?:@tests\s+)?@(?:llr|hlr)\b(?P<refs>[^*]*)", re.IGNORECASE
    )
    COMMENT_PATTERN = re.compile(r"^\s*(?://|#|/\*|\*)")

    SYMBOL_PATTERNS = [
        # Python
        re.compile(r"^\s*(?:async\s+)?def\s+(\w+)"),
        re.compile(r"^\s*class\s+(\w+)"),
        # Go
        re.compile(r"^\s*func\s+(?:\(\w+\s+\*?[\w\[\]]+\)\s+)?(\w+)"),
        # C/C++
        re.compile(r"^\s*(?:class|struct)\s+(\w+)"),
        re.compile(r"^\s*(?:[\w:<>,*&]+\s+)+\**&?([\w:~]+)\s*\("),
    ]

    def __init__(self, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        self.extensions = {e.lower() for e in extensions}

    def can_parse(self, file_path: Path) -> bool:
        """True for the configured source file extensions."""
        return file_path.suffix.lower() in self.extensions

    def parse(self, content: str) -> dict[str, list[str]]:
        """Collect the tagged requirement IDs of one source file.

        Args:
            content: File content to parse.

        Returns:
            Mapping of anchor ("" for the whole file, otherwise the tagged
            symbol name) to requirement IDs, in order of appearance.
        """
        refs: dict[str, list[str]] = {}
        pending: list[str] = []

        for line in content.split("\n"):
            tag = self.TAG_PATTERN.match(line)
            if tag:
                pending.extend(find_req_ids(tag.group("refs")))
                continue
            if not pending or not line.strip() or self.COMMENT_PATTERN.match(line):
                continue

            anchor = self._symbol(line) or ""
            ids = refs.setdefault(anchor, [])
            ids.extend(i for i in pending if i not in ids)
            pending = []

        if pending:
            ids = refs.setdefault("", [])
            ids.extend(i for i in pending if i not in ids)
        return refs

    def parse_file(self, path: Path) -> dict[str, list[str]]:
        """Collect the tagged requirement IDs of the file at path."""
        return self.parse(Path(path).read_text(encoding="utf-8", errors="replace"))

    def _symbol(self, line: str) -> str | None:
        for pattern in self.SYMBOL_PATTERNS:
            match = pattern.match(line)
            if match:
                return match.group(1)
        return None


def find_code_files(roots: Iterable[Path], parser: CodeParser) -> list[Path]:
    """Source files under roots that parser can handle, sorted."""
    files: set[Path] = set()
    for root in roots:
        root = Path(root)
        if root.is_file():
            if parser.can_parse(root):
                files.add(root)
            continue
        for path in root.rglob("*"):
            if path.is_file() and parser.can_parse(path) and not any(
                part.startswith(".") for part in path.relative_to(root).parts
            ):
                files.add(path)
    return sorted(files)


def scan_code_refs(paths: Iterable[Path], graph: ReqGraph, parser: CodeParser | None = None) -> int:
    """Attach the code references of source files to the graph.

    Returns:
        Number of code reference records added or updated.
    """
    parser = parser or CodeParser()
    count = 0
    for path in paths:
        for anchor, ids in parser.parse_file(path).items():
            if not ids:
                continue
            graph.add_code_refs(code_ref_key(str(path), anchor), str(path), anchor, ids)
            count += 1
    logger.debug("attached %d code references", count)
    return count
