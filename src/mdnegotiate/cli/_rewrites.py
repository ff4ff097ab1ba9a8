"""``md-negotiate rewrites``: print generated rewrite rules as JSON."""

import argparse

from mdnegotiate.cli._resolve import rules_from_args
from mdnegotiate.rewrites import rules_to_json


def run_rewrites(args: argparse.Namespace) -> None:
    """Print one rule per route, in route order."""
    print(rules_to_json(rules_from_args(args)))
