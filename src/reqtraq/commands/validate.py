"""
reqtraq.commands.validate - Validate certdocs and the requirement graph.
"""

import argparse

from reqtraq.commands.common import load_configuration, print_errors
from reqtraq.factory import build_graph


def run(args: argparse.Namespace) -> int:
    """
    Run the validate command.

    Parses every certdoc, attaches code references and checks that every
    parent and code reference resolves.

    Returns:
        Exit code (0 for success, 1 for validation errors)
    """
    config = load_configuration(args)
    if config is None:
        return 1

    graph, errors = build_graph(args.files, config, code_paths=args.code or [])
    print_errors(errors)

    link_errors = graph.resolve()
    for message in link_errors:
        print(f"Error: {message}")

    total = len(errors) + len(link_errors)
    if not args.quiet:
        print(f"Found {len(graph)} requirements and code references, {total} errors")
    return 1 if total else 0
