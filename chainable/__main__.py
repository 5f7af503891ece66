#!/usr/bin/env python3
r"""Chainable CLI.

Commands:
    python -m chainable --version     Show version
    python -m chainable info          Show detailed version and system info
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from ._version import __version__, print_version_info


def cmd_info(args: argparse.Namespace) -> int:
    """Show detailed version and system information."""
    print_version_info()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chainable",
        description="Chainable accessor objects: version and diagnostics.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command")
    info = subparsers.add_parser("info", help="Show version and system info")
    info.set_defaults(func=cmd_info)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
