"""Compiled pattern matchers and the matcher cache.

A pattern compiles to an anchored regular expression in three steps:
tokenize into Literal/Param/CatchAll pieces, escape each literal piece,
then emit a named group per dynamic piece. Escaping happens per piece,
so literal text such as ``v1.0`` or ``(group)`` never turns into regex
syntax and dynamic groups are never escaped.
"""

import re
import threading
from dataclasses import dataclass

from mdnegotiate.errors import InvalidPatternError
from mdnegotiate.routing.pattern import CatchAll, Literal, Param, tokenize

# Regex fragment for each dynamic piece
PARAM_REGEX = r"[^/]+"
CATCH_ALL_REGEX = r".+"


@dataclass(frozen=True, slots=True)
class CompiledMatcher:
    """A route pattern compiled to a whole-path regular expression."""

    pattern: str
    regex: re.Pattern[str]

    def match(self, path: str) -> dict[str, str] | None:
        """Return the parameter bindings for *path*, or ``None``."""
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return dict(found.groupdict())


def compile_pattern(pattern: str) -> CompiledMatcher:
    """Compile *pattern* into a ``CompiledMatcher``.

    Pure and idempotent: the same text always yields the same expression.
    Raises ``InvalidPatternError`` if a parameter name is repeated.
    """
    parts: list[str] = []
    for piece in tokenize(pattern):
        match piece:
            case Literal(text):
                parts.append(re.escape(text))
            case Param(name):
                parts.append(f"(?P<{name}>{PARAM_REGEX})")
            case CatchAll(name):
                parts.append(f"(?P<{name}>{CATCH_ALL_REGEX})")

    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc
    return CompiledMatcher(pattern=pattern, regex=regex)


class MatcherCache:
    """Lazily compiled matchers keyed by raw pattern text.

    Entries are never evicted: the key space is the application's route
    configuration, not request input. Reads are lock-free; writes take a
    lock so concurrent registration cannot corrupt the dict. Two threads
    compiling the same pattern at once both produce identical matchers.

    Usage::

        cache = MatcherCache()
        cache.match("/products/[productId]", "/products/abc")
        # {"productId": "abc"}
    """

    __slots__ = ("_lock", "_matchers")

    def __init__(self) -> None:
        self._matchers: dict[str, CompiledMatcher] = {}
        self._lock = threading.Lock()

    def get(self, pattern: str) -> CompiledMatcher:
        """Return the compiled matcher for *pattern*, compiling on first use."""
        matcher = self._matchers.get(pattern)
        if matcher is not None:
            return matcher
        matcher = compile_pattern(pattern)
        with self._lock:
            return self._matchers.setdefault(pattern, matcher)

    def match(self, pattern: str, path: str) -> dict[str, str] | None:
        """Match *path* against *pattern* using the cached matcher."""
        return self.get(pattern).match(path)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._matchers

    def __len__(self) -> int:
        return len(self._matchers)


_default_cache = MatcherCache()


def default_cache() -> MatcherCache:
    """The cache used when callers do not supply their own."""
    return _default_cache


def match_path(
    pattern: str,
    path: str,
    *,
    cache: MatcherCache | None = None,
) -> dict[str, str] | None:
    """Match *path* against a bracket-syntax route *pattern*.

    Examples::

        match_path("/products/[productId]", "/products/abc")  # {"productId": "abc"}
        match_path("/docs/[...slug]", "/docs/a/b/c")          # {"slug": "a/b/c"}
        match_path("/docs/[...slug]", "/docs")                # None
    """
    if cache is None:
        cache = _default_cache
    return cache.match(pattern, path)
