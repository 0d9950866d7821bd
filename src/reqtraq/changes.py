"""Change detection between two requirement graphs.

The result is the diff set used by Req.matches to select only the
requirements that changed, e.g. between the graph built from a base
revision and the graph built from the working tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from reqtraq.core.graph import ReqGraph
from reqtraq.core.models import RequirementLevel
from reqtraq.factory import build_graph
from reqtraq.utilities.git import RepoContext, temporary_worktree

logger = logging.getLogger(__name__)

NEW = "new"
COMPARED_FIELDS = ("title", "body", "parent_ids", "attributes")


def diff_graphs(old: ReqGraph, new: ReqGraph) -> dict[str, list[str]]:
    """Map each added or changed requirement ID to what changed.

    Code references are ignored. Requirements only in old (removed) are
    not reported.

    Args:
        old: Graph before the change.
        new: Graph after the change.

    Returns:
        ID -> ["new"] for added requirements, or the names of the
        changed fields among title, body, parent_ids and attributes.
    """
    diffs: dict[str, list[str]] = {}
    for req_id, req in new.items():
        if req.level == RequirementLevel.CODE:
            continue
        before = old.get(req_id)
        if before is None or before.level == RequirementLevel.CODE:
            diffs[req_id] = [NEW]
            continue
        changed = [f for f in COMPARED_FIELDS if getattr(before, f) != getattr(req, f)]
        if changed:
            diffs[req_id] = changed
    return diffs


def build_graph_at(
    ref: str,
    certdocs: Iterable[Path],
    config: dict[str, Any] | None = None,
    repo: RepoContext | None = None,
) -> tuple[ReqGraph, list[Exception]]:
    """Build the graph of certdocs as they are at a git revision.

    The certdoc paths of the working tree are mapped into a temporary
    worktree of ref. Paths that do not exist at ref are skipped, so their
    requirements show up as new.

    Args:
        ref: Git revision to compare against.
        certdocs: Certdoc files or directories in the working tree.
        config: Configuration dict (defaults if None).
        repo: Repository of the certdocs (discovered from the first one if None).

    Raises:
        PathResolutionError: If the certdocs are not in a git repository.
        subprocess.CalledProcessError: If ref cannot be checked out.
    """
    certdocs = [Path(p) for p in certdocs]
    if repo is None:
        repo = RepoContext.discover(certdocs[0] if certdocs else None)

    with temporary_worktree(repo.root, ref) as tree:
        old_repo = RepoContext(root=tree, name=repo.name)
        paths = []
        for path in certdocs:
            old_path = tree / repo.path_in_repo(path)
            if old_path.exists():
                paths.append(old_path)
            else:
                logger.info("%s does not exist at %s", path, ref)
        return build_graph(paths, config, repo=old_repo)
