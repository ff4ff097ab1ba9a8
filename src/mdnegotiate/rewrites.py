"""Rewrite rules for an external routing engine.

Each route pattern becomes one rule that sends markdown-accepting
requests to the internal markdown path::

    create_markdown_rewrites(["/blog/[slug]"])
    # [RewriteRule(source="/blog/:slug", destination="/md-api/blog/:slug", ...)]

Rules are evaluated first-match-wins by the consuming engine, so output
order always equals input order.
"""

import json as json_module
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from mdnegotiate.config import DEFAULT_INTERNAL_PREFIX
from mdnegotiate.routing.pattern import validate_pattern
from mdnegotiate.versions import MarkdownVersion

# Matches any of the three markdown media types anywhere in the header value
MARKDOWN_ACCEPT_REGEX = ".*(text/markdown|application/markdown|text/x-markdown).*"

_CATCH_ALL_RE = re.compile(r"\[\.\.\.([A-Za-z_]+)\]")
_PARAM_RE = re.compile(r"\[([A-Za-z_]+)\]")


@dataclass(frozen=True, slots=True)
class HeaderCondition:
    """Rule condition: a request header whose value matches a regex."""

    header: str = "accept"
    value_matches: str = MARKDOWN_ACCEPT_REGEX

    def to_dict(self) -> dict[str, str]:
        return {"type": "header", "key": self.header, "value": self.value_matches}


@dataclass(frozen=True, slots=True)
class RewriteRule:
    """A declarative rewrite from a public path to the internal markdown path."""

    source: str
    destination: str
    condition: HeaderCondition = field(default_factory=HeaderCondition)

    def to_dict(self) -> dict[str, Any]:
        """Render the rule in the routing engine's wire shape."""
        return {
            "source": self.source,
            "has": [self.condition.to_dict()],
            "destination": self.destination,
        }


def to_rewrite_source(pattern: str) -> str:
    """Convert bracket syntax to placeholder syntax.

    ``[...name]`` becomes ``:name*`` and ``[name]`` becomes ``:name``;
    literal segments pass through unchanged.
    """
    converted = _CATCH_ALL_RE.sub(r":\1*", pattern)
    return _PARAM_RE.sub(r":\1", converted)


def create_markdown_rewrites(
    routes: Iterable[str],
    internal_prefix: str = DEFAULT_INTERNAL_PREFIX,
) -> list[RewriteRule]:
    """Generate one rewrite rule per route, preserving order.

    Every route is validated first; a malformed pattern raises
    ``InvalidPatternError`` before any rule is produced for it.
    """
    rules: list[RewriteRule] = []
    for route in routes:
        validate_pattern(route)
        source = to_rewrite_source(route)
        rules.append(RewriteRule(source=source, destination=f"{internal_prefix}{source}"))
    return rules


def create_rewrites_from_config(
    versions: Iterable[MarkdownVersion],
    internal_prefix: str = DEFAULT_INTERNAL_PREFIX,
) -> list[RewriteRule]:
    """Generate rewrite rules straight from a markdown version registry.

    Saves repeating the route list::

        rules = create_rewrites_from_config(registry)
    """
    return create_markdown_rewrites(
        [version.pattern for version in versions],
        internal_prefix=internal_prefix,
    )


def rules_to_json(rules: Iterable[RewriteRule], *, indent: int | None = 2) -> str:
    """Serialize rules to JSON in the routing engine's wire shape."""
    return json_module.dumps([rule.to_dict() for rule in rules], indent=indent)
