"""
reqtraq.commands.list_cmd - List requirements matching filters.
"""

import argparse
import logging
import re
import subprocess
import sys
from typing import Dict, List, Optional

from reqtraq.changes import build_graph_at, diff_graphs
from reqtraq.commands.common import load_configuration, print_errors
from reqtraq.core.models import Req, ReqFilter, RequirementLevel
from reqtraq.errors import ReqtraqError
from reqtraq.factory import build_graph

logger = logging.getLogger(__name__)

LEVEL_ORDER = [RequirementLevel.HIGH, RequirementLevel.LOW]


def run(args: argparse.Namespace) -> int:
    """
    Run the list command.

    Prints the SYSTEM requirements in document order, then the lower
    levels, keeping only those that match the --id/--title/--body filters
    and, with --since, only those changed since that revision.

    Returns:
        Exit code (0 for success, 1 on parse errors or bad filters)
    """
    config = load_configuration(args)
    if config is None:
        return 1

    try:
        req_filter = ReqFilter.from_strings(id=args.id, title=args.title, body=args.body)
    except re.error as e:
        print(f"Error: invalid filter: {e}", file=sys.stderr)
        return 1

    graph, errors = build_graph(args.files, config, code_paths=args.code or [])
    if errors:
        print_errors(errors)

    diffs: Optional[Dict[str, List[str]]] = None
    if args.since:
        try:
            old_graph, old_errors = build_graph_at(args.since, args.files, config)
        except (ReqtraqError, subprocess.CalledProcessError) as e:
            print(f"Error: cannot read certdocs at {args.since}: {e}", file=sys.stderr)
            return 1
        for error in old_errors:
            logger.warning("at %s: %s", args.since, error)
        diffs = diff_graphs(old_graph, graph)

    reqs: list[Req] = list(graph.ords_by_position())
    for level in LEVEL_ORDER:
        reqs.extend(graph.by_level(level))

    shown = 0
    for req in reqs:
        if not req.matches(req_filter, diffs):
            continue
        shown += 1
        marker = " [DELETED]" if req.is_deleted() else ""
        line = f"{req.id}{marker}\t{req.title}\t{req.path}"
        if diffs is not None:
            line += "\t" + ",".join(diffs[req.id])
        print(line)

    if not args.quiet and (diffs is not None or not req_filter.is_empty()):
        print(f"{shown} of {len(reqs)} requirements selected", file=sys.stderr)

    return 1 if errors else 0
