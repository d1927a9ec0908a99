from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from ._logging import setup_colored_logging
from ._version import __version__
from .analyzer import Analyzer
from .config import AnalyzerConfig
from .exceptions import CatalogError, ParseError

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = {"node_modules", ".git"}
SCRIPT_SUFFIXES = {".js", ".cjs"}

_DESCRIPTION = """\
webtask-analyzer: static dependency analysis for webtask scripts

Reports every require() call and every undeclared global in a script, with
requires resolved against the modules available on a webtask cluster.

The cluster is taken from WEBTASK_CLUSTER_URL, WEBTASK_CONTAINER and
WEBTASK_TOKEN when set, otherwise from a profile in ~/.webtask."""


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the command line tool."""
    parser = argparse.ArgumentParser(
        description=_DESCRIPTION,
        prog="webtask-analyzer",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--profile",
        type=str,
        default="default",
        help="webtask profile to use when no WEBTASK_* variables are set (default: %(default)s)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print the resolved dependencies of scripts as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    analyze_parser.add_argument(
        "files",
        nargs="+",
        type=str,
        help="Script files or directories (searched recursively, excluding node_modules)",
    )

    subparsers.add_parser(
        "modules",
        help="Print the module catalog of the cluster as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.error("A subcommand is required. See 'webtask-analyzer --help'.")

    setup_colored_logging(level=getattr(logging, args.log_level))

    try:
        config = AnalyzerConfig.from_environment() or AnalyzerConfig.from_profile(args.profile)
    except ValueError as e:
        parser.error(f"Invalid cluster configuration: {e}")

    analyzer = Analyzer(config)

    try:
        if args.command == "modules":
            catalog = asyncio.run(analyzer.load_module_list())
            print(json.dumps(catalog.to_dict(), indent=2))
        elif args.command == "analyze":
            files = expand_paths(args.files)
            results = asyncio.run(_analyze_files(analyzer, files))
            print(json.dumps(results, indent=2))
    except CatalogError as e:
        print(f"Error: could not load module list: {e}", file=sys.stderr)
        sys.exit(2)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def expand_paths(paths: list[str]) -> list[Path]:
    """
    Expand file/directory paths to a list of script files.

    Directories are searched recursively for .js and .cjs files, excluding
    node_modules and .git.
    """
    scripts: list[Path] = []

    for path_str in paths:
        path = Path(path_str)
        if path.is_file():
            scripts.append(path)
        elif path.is_dir():
            scripts.extend(
                sorted(
                    script
                    for script in path.rglob("*")
                    if script.suffix in SCRIPT_SUFFIXES
                    and not any(parent.name in EXCLUDED_DIRS for parent in script.parents)
                )
            )
        else:
            print(f"Error: Path not found: {path_str}", file=sys.stderr)
            sys.exit(1)

    return scripts


async def _analyze_files(analyzer: Analyzer, files: list[Path]) -> dict[str, list[dict]]:
    results: dict[str, list[dict]] = {}
    for path in files:
        source = path.read_bytes()
        try:
            dependencies = await analyzer.find_dependencies_in_code(source)
        except ParseError as e:
            raise ParseError(f"{path}: {e.message}", e.line, e.column, e.offset) from e
        results[str(path)] = [dependency.to_dict() for dependency in dependencies]
        logger.info(f"{path}: {len(dependencies)} dependencies")
    return results


if __name__ == "__main__":
    main()
