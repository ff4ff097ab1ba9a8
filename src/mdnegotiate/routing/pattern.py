"""Route pattern grammar: Literal, Param, and CatchAll segments.

Patterns use bracket syntax::

    /about                 -> [Literal("about")]
    /products/[productId]  -> [Literal("products"), Param("productId")]
    /docs/[...slug]        -> [Literal("docs"), CatchAll("slug")]
    /                      -> []
"""

import re
from dataclasses import dataclass
from typing import TypeAlias

from mdnegotiate.errors import InvalidPatternError

_LITERAL_RE = re.compile(r"[A-Za-z0-9_-]+")
_DYNAMIC_RE = re.compile(r"\[(\.\.\.)?([A-Za-z_]+)\]")


@dataclass(frozen=True, slots=True)
class Literal:
    """Static text, matched verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class Param:
    """Exactly one path segment bound to ``name``."""

    name: str


@dataclass(frozen=True, slots=True)
class CatchAll:
    """One or more trailing path segments bound to ``name``."""

    name: str


Segment: TypeAlias = Literal | Param | CatchAll


@dataclass(frozen=True, slots=True)
class RoutePattern:
    """A validated route pattern. Immutable after parsing."""

    text: str
    segments: tuple[Segment, ...]


def parse_pattern(pattern: str) -> RoutePattern:
    """Parse and validate a route pattern string.

    Raises ``InvalidPatternError`` when the pattern does not start with
    ``/``, has empty segments, contains characters outside the literal
    set, places a catch-all anywhere but last, or repeats a parameter name.
    """
    if pattern == "/":
        return RoutePattern(text=pattern, segments=())
    if not pattern.startswith("/"):
        raise InvalidPatternError(pattern, "Pattern must start with '/'.")

    parts = pattern[1:].split("/")
    segments: list[Segment] = []
    seen: set[str] = set()

    for index, part in enumerate(parts):
        if not part:
            raise InvalidPatternError(pattern, "Empty path segment.")

        if _LITERAL_RE.fullmatch(part):
            segments.append(Literal(part))
            continue

        dynamic = _DYNAMIC_RE.fullmatch(part)
        if dynamic is None:
            raise InvalidPatternError(pattern, f"Malformed segment {part!r}.")

        is_catch_all, name = dynamic.group(1), dynamic.group(2)
        if name in seen:
            raise InvalidPatternError(pattern, f"Duplicate parameter name {name!r}.")
        seen.add(name)

        if is_catch_all:
            if index != len(parts) - 1:
                raise InvalidPatternError(
                    pattern, f"Catch-all [...{name}] must be the final segment."
                )
            segments.append(CatchAll(name))
        else:
            segments.append(Param(name))

    return RoutePattern(text=pattern, segments=tuple(segments))


def validate_pattern(pattern: str) -> None:
    """Raise ``InvalidPatternError`` if *pattern* is malformed."""
    parse_pattern(pattern)


def tokenize(pattern: str) -> tuple[Segment, ...]:
    """Split raw pattern text into literal and dynamic pieces.

    Unlike ``parse_pattern`` this does not enforce the grammar: literal
    pieces keep their separators and any characters they contain, so
    ``/docs/(group)/[id]`` yields ``Literal("/docs/(group)/"), Param("id")``.
    Catch-all tokens are recognized before plain params by the shared
    expression, so ``[...slug]`` is never read as ``[slug]``.
    """
    pieces: list[Segment] = []
    position = 0
    for token in _DYNAMIC_RE.finditer(pattern):
        if token.start() > position:
            pieces.append(Literal(pattern[position : token.start()]))
        name = token.group(2)
        pieces.append(CatchAll(name) if token.group(1) else Param(name))
        position = token.end()
    if position < len(pattern):
        pieces.append(Literal(pattern[position:]))
    return tuple(pieces)
