"""
reqtraq.cli - Command-line interface.

Main entry point for the reqtraq CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from reqtraq import __version__
from reqtraq.commands import linkify_cmd, list_cmd, validate


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="reqtraq",
        description="Requirement tracing across certification documents and code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reqtraq list certdocs/                      # List all requirements
  reqtraq list certdocs/ --id 'REQ-0-DDLN-SWH' --body thrust
  reqtraq list certdocs/ --since main        # Requirements changed since main
  reqtraq validate certdocs/ --code src/      # Check parents and code references
  reqtraq linkify 0-DDLN-100-ORD.lyx -o out.lyx

For detailed command help: reqtraq <command> --help
        """,
    )

    # Global options
    parser.add_argument("--version", action="version", version=f"reqtraq {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to .reqtraq.toml (default: nearest one above the current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose (debug) logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print errors")

    subparsers = parser.add_subparsers(dest="command", title="commands")

    # list
    list_parser = subparsers.add_parser("list", help="List requirements matching filters")
    list_parser.add_argument("files", nargs="+", type=Path, help="Certdocs or directories")
    list_parser.add_argument("--id", help="Regular expression matched against requirement IDs")
    list_parser.add_argument("--title", help="Regular expression matched against titles")
    list_parser.add_argument("--body", help="Regular expression matched against bodies")
    list_parser.add_argument(
        "--since", metavar="REV", help="Only requirements added or changed since this git revision"
    )
    list_parser.add_argument(
        "--code", nargs="*", type=Path, help="Source files or directories with @llr/@hlr tags"
    )

    # validate
    validate_parser = subparsers.add_parser(
        "validate", help="Parse certdocs and check that all references resolve"
    )
    validate_parser.add_argument("files", nargs="+", type=Path, help="Certdocs or directories")
    validate_parser.add_argument(
        "--code", nargs="*", type=Path, help="Source files or directories with @llr/@hlr tags"
    )

    # linkify
    linkify_parser = subparsers.add_parser(
        "linkify", help="Write a LyX certdoc with requirement IDs turned into links"
    )
    linkify_parser.add_argument("file", type=Path, help="LyX certdoc")
    linkify_parser.add_argument("-o", "--output", type=Path, required=True, help="Output file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install reqtraq[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "list":
            return list_cmd.run(args)
        elif args.command == "validate":
            return validate.run(args)
        elif args.command == "linkify":
            return linkify_cmd.run(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
