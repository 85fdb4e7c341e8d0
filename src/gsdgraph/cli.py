"""
gsdgraph.cli - Command-line interface.

Main entry point for the gsdgraph CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gsdgraph import __version__
from gsdgraph.commands import graph_cmd, parse_cmd, pipeline_cmd


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gsdgraph",
        description="Parse GSD planning documents into an entity graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gsdgraph graph                    # Graph of the project in the current directory
  gsdgraph graph ~/proj --format summary
  gsdgraph roadmap ~/proj           # Phases and plans as JSON
  gsdgraph state                    # Current position and blockers
  gsdgraph tree                     # Merged source trees
  gsdgraph pipeline                 # Workflow stage of every phase

Configuration:
  Settings are read from .gsdgraph.toml in the project or a parent
  directory, and from GSDGRAPH_<SECTION>_<KEY> environment variables.
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"gsdgraph {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    graph_parser = subparsers.add_parser(
        "graph",
        help="Assemble the project graph",
    )
    _add_project_argument(graph_parser)
    graph_parser.add_argument(
        "--format",
        choices=["json", "summary"],
        default="json",
        help="Output format (default: json)",
    )
    graph_parser.add_argument(
        "--no-state",
        action="store_true",
        help="Leave STATE.md blockers out of the graph",
    )

    for name, help_text in parse_cmd.DOCUMENT_COMMANDS.items():
        doc_parser = subparsers.add_parser(name, help=help_text)
        _add_project_argument(doc_parser)

    pipeline_parser = subparsers.add_parser(
        "pipeline",
        help="Show the workflow stage of each phase",
    )
    _add_project_argument(pipeline_parser)

    return parser


def _add_project_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Project root directory (default: current directory)",
    )


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args)

    try:
        if args.command == "graph":
            return graph_cmd.run(args)
        elif args.command in parse_cmd.DOCUMENT_COMMANDS:
            return parse_cmd.run(args)
        elif args.command == "pipeline":
            return pipeline_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
