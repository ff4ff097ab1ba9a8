"""Route resolution for CLI commands.

Routes come either from repeated ``--route`` flags or from a
``"module:attribute"`` import string naming a ``MarkdownRegistry``.
"""

import argparse
import importlib
import sys

from mdnegotiate.errors import InvalidPatternError
from mdnegotiate.rewrites import RewriteRule, create_markdown_rewrites
from mdnegotiate.versions import MarkdownRegistry


def resolve_registry(import_string: str) -> MarkdownRegistry:
    """Resolve an import string to a ``MarkdownRegistry``.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"registry"``. Callables are treated as factories.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``MarkdownRegistry``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "registry"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, MarkdownRegistry):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, MarkdownRegistry):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a MarkdownRegistry"
        raise TypeError(msg)

    return obj


def rules_from_args(args: argparse.Namespace) -> list[RewriteRule]:
    """Build rewrite rules from parsed CLI args, exiting 1 on bad input."""
    try:
        if args.registry is not None:
            routes = resolve_registry(args.registry).patterns
        else:
            routes = args.routes
        return create_markdown_rewrites(routes, internal_prefix=args.prefix)
    except (ModuleNotFoundError, AttributeError, TypeError, InvalidPatternError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
