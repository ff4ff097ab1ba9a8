"""Routing: bracket-syntax route patterns compiled into cached matchers.

Patterns are validated when they are registered and compiled lazily on
first match.
"""

from mdnegotiate.routing.matcher import CompiledMatcher, MatcherCache, compile_pattern, match_path
from mdnegotiate.routing.pattern import (
    CatchAll,
    Literal,
    Param,
    RoutePattern,
    parse_pattern,
    validate_pattern,
)

__all__ = [
    "CatchAll",
    "CompiledMatcher",
    "Literal",
    "MatcherCache",
    "Param",
    "RoutePattern",
    "compile_pattern",
    "match_path",
    "parse_pattern",
    "validate_pattern",
]
