"""Line reading shared by the certdoc parsers."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TextIO

from reqtraq.errors import EncodingError


def numbered_lines(f: TextIO, path: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, line without its line break) from f.

    Text is decoded in chunks, so a decoding error carries no line number.

    Raises:
        EncodingError: If the file is not valid UTF-8.
    """
    try:
        for line_no, raw in enumerate(f, start=1):
            yield line_no, raw.rstrip("\r\n")
    except UnicodeDecodeError as e:
        raise EncodingError(f"not valid UTF-8: {e}", path=path) from e
