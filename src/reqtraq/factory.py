"""Graph factory - Shared utility for building a ReqGraph from certdocs.

Commands use this single entry point instead of walking and parsing
files themselves.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from reqtraq.certdoc import find_certdocs, parse_certdoc_to_graph
from reqtraq.config.defaults import DEFAULT_CONFIG
from reqtraq.core.graph import ReqGraph
from reqtraq.parsers.code import CodeParser, find_code_files, scan_code_refs
from reqtraq.utilities.git import RepoContext


def expand_certdoc_paths(paths: Iterable[Path]) -> list[Path]:
    """Replace directories in paths by the certdocs they contain."""
    files: list[Path] = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            files.extend(find_certdocs(path))
        else:
            files.append(path)
    return files


def build_graph(
    certdocs: Iterable[Path],
    config: dict[str, Any] | None = None,
    code_paths: Iterable[Path] = (),
    repo: RepoContext | None = None,
) -> tuple[ReqGraph, list[Exception]]:
    """Build a graph from certdocs and, optionally, source code.

    Files are parsed one after the other; the errors of all files are
    collected instead of stopping at the first failing file.

    Args:
        certdocs: Certdoc files or directories containing them.
        config: Configuration dict (defaults if None).
        code_paths: Source files or directories to scan for code references.
        repo: Repository context for LyX links (discovered per file if None).

    Returns:
        Tuple of (graph, errors).
    """
    config = config or DEFAULT_CONFIG
    base_url = config.get("links", {}).get("base_url", DEFAULT_CONFIG["links"]["base_url"])
    attributes = config.get("requirements", {}).get(
        "attributes", DEFAULT_CONFIG["requirements"]["attributes"]
    )

    graph = ReqGraph()
    errors: list[Exception] = []
    for path in expand_certdoc_paths(certdocs):
        errors.extend(
            parse_certdoc_to_graph(
                path, graph, repo=repo, attribute_names=attributes, base_url=base_url
            )
        )

    code_paths = list(code_paths)
    if code_paths:
        extensions = config.get("code", {}).get("extensions", DEFAULT_CONFIG["code"]["extensions"])
        parser = CodeParser(extensions)
        scan_code_refs(find_code_files(code_paths, parser), graph, parser)

    return graph, errors
