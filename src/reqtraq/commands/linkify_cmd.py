"""
reqtraq.commands.linkify_cmd - Write the linkified copy of a LyX certdoc.
"""

import argparse
import sys

from reqtraq.commands.common import load_configuration
from reqtraq.errors import ReqtraqError
from reqtraq.parsers.lyx import parse_lyx


def run(args: argparse.Namespace) -> int:
    """
    Run the linkify command.

    Returns:
        Exit code (0 for success, 1 if the certdoc could not be parsed)
    """
    config = load_configuration(args)
    if config is None:
        return 1
    base_url = config["links"]["base_url"]

    try:
        with open(args.output, "w", encoding="utf-8") as sink:
            reqs = parse_lyx(args.file, sink, base_url=base_url)
    except (ReqtraqError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"{args.file}: {len(reqs)} requirements, written to {args.output}")
    return 0
