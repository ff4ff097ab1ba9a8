"""md-negotiate CLI: rewrite generation and config patching.

Entry point registered as ``md-negotiate`` in ``pyproject.toml``::

    [project.scripts]
    md-negotiate = "mdnegotiate.cli:main"
"""

import argparse
import sys

from mdnegotiate.config import DEFAULT_INTERNAL_PREFIX


def _add_route_source(parser: argparse.ArgumentParser) -> None:
    """``--route`` (repeatable) or ``--registry`` (import string)."""
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--route",
        dest="routes",
        action="append",
        metavar="PATTERN",
        help="Route pattern with a markdown version, e.g. /blog/[slug] (repeatable)",
    )
    source.add_argument(
        "--registry",
        metavar="IMPORT",
        help="Import string of a MarkdownRegistry (e.g. myapp.md:registry)",
    )
    parser.add_argument(
        "--prefix",
        default=DEFAULT_INTERNAL_PREFIX,
        help=f"Internal markdown path prefix (default: {DEFAULT_INTERNAL_PREFIX})",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``md-negotiate`` command."""
    parser = argparse.ArgumentParser(
        prog="md-negotiate",
        description="md-negotiate: serve markdown and HTML from the same URL.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- md-negotiate rewrites ---------------------------------------------
    rewrites_parser = subparsers.add_parser(
        "rewrites", help="Print rewrite rules for the given routes as JSON"
    )
    _add_route_source(rewrites_parser)

    # -- md-negotiate patch ------------------------------------------------
    patch_parser = subparsers.add_parser(
        "patch", help="Add rewrite rules to next.config.{ts,mjs,js}"
    )
    patch_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Config file, or project directory to search (default: .)",
    )
    _add_route_source(patch_parser)
    patch_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the patched config instead of writing it",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "rewrites":
        from mdnegotiate.cli._rewrites import run_rewrites

        run_rewrites(args)
    elif args.command == "patch":
        from mdnegotiate.cli._patch import run_patch

        run_patch(args)
