"""Command line entry point: check every Ruby file under the given paths."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from loguru import logger

from .checker import check_file
from .errors import CleanCodeError
from .source_parser import RubySourceParser
from .utils import iter_source_files

log = logging.getLogger(__name__)

BANNER_RULE = "=" * 18
LOG_FORMAT = "cleancode: %(levelname)s: %(message)s"


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cleancode",
        description="Warn about long parameter lists, boolean flag arguments, "
                    "complex methods and law of demeter violations in Ruby code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Every .rb file below the current directory
  cleancode

  # Selected files and directories
  cleancode app/models lib/tasks/import.rb

  # Same output as the original tool: names and parameters are not
  # restored when leaving a nested class, method or block
  cleancode --unscoped
        """
    )

    parser.add_argument("paths", nargs="*", default=["."], metavar="PATH",
                        help="Ruby file or directory to check (default: current directory)")
    parser.add_argument("--unscoped", action="store_true",
                        help="Do not restore class/method names and parameters on leaving a scope")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log parsing and traversal details to stderr")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point."""
    args = _parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    if args.verbose:
        logger.remove()
        logger.add(sys.stderr, format="[{level}] {message}", level="DEBUG")
        logger.enable("cleancode")

    parser = RubySourceParser()
    try:
        for path in iter_source_files(args.paths):
            print(f"checking : {path}")
            print(BANNER_RULE)
            check_file(path, parser=parser, scoped=not args.unscoped)
    except CleanCodeError as e:
        log.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
