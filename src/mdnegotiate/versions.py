"""Markdown versions: per-route producers of markdown content.

A version pairs a route pattern with a producer that receives the
matched parameters::

    registry = MarkdownRegistry()

    @registry.version("/products/[productId]")
    async def product(params):
        item = await get_product(params["productId"])
        return f"# {item.name}\\n\\n{item.description}"

The registry is the single source of truth: rewrite rules, negotiators,
and the markdown handler are all derived from it.
"""

from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TypeAlias

from mdnegotiate._internal.invoke import invoke
from mdnegotiate.errors import HandlerExecutionError
from mdnegotiate.routing.matcher import MatcherCache, default_cache
from mdnegotiate.routing.pattern import validate_pattern

MarkdownProducer: TypeAlias = Callable[[dict[str, str]], str | Awaitable[str]]


@dataclass(frozen=True, slots=True)
class MarkdownVersion:
    """A route pattern and the producer that renders its markdown."""

    pattern: str
    handler: MarkdownProducer


def md_version(pattern: str, handler: MarkdownProducer) -> MarkdownVersion:
    """Define the markdown version of a route.

    The pattern is validated immediately; a malformed pattern raises
    ``InvalidPatternError`` here rather than on the first request.
    """
    validate_pattern(pattern)
    return MarkdownVersion(pattern=pattern, handler=handler)


class MarkdownRegistry:
    """Ordered collection of markdown versions.

    Resolution is first-match-wins in registration order, the same order
    the rewrite rules are emitted in.
    """

    __slots__ = ("_cache", "_versions")

    def __init__(
        self,
        versions: Iterable[MarkdownVersion] = (),
        *,
        cache: MatcherCache | None = None,
    ) -> None:
        self._versions: list[MarkdownVersion] = []
        self._cache = cache if cache is not None else default_cache()
        for version in versions:
            self.add(version)

    def add(self, version: MarkdownVersion) -> None:
        """Register a version, validating its pattern."""
        validate_pattern(version.pattern)
        self._versions.append(version)

    def version(self, pattern: str) -> Callable[[MarkdownProducer], MarkdownProducer]:
        """Decorator form of ``add``; returns the producer unchanged."""

        def decorator(handler: MarkdownProducer) -> MarkdownProducer:
            self.add(md_version(pattern, handler))
            return handler

        return decorator

    @property
    def patterns(self) -> list[str]:
        return [version.pattern for version in self._versions]

    def resolve(self, path: str) -> tuple[MarkdownVersion, dict[str, str]] | None:
        """Find the first version whose pattern matches *path*."""
        for version in self._versions:
            params = self._cache.match(version.pattern, path)
            if params is not None:
                return version, params
        return None

    def __iter__(self) -> Iterator[MarkdownVersion]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)


async def render_version(
    version: MarkdownVersion,
    params: dict[str, str],
    *,
    path: str = "",
    in_thread: bool = False,
) -> str:
    """Run a version's producer, wrapping any failure.

    Raises ``HandlerExecutionError`` chained to the producer's exception.
    """
    try:
        result = await invoke(version.handler, params, in_thread=in_thread)
    except Exception as exc:
        raise HandlerExecutionError(version.pattern, path) from exc
    if not isinstance(result, str):
        msg = (
            f"Markdown handler for {version.pattern!r} returned "
            f"{type(result).__name__}, expected str"
        )
        raise HandlerExecutionError(version.pattern, path) from TypeError(msg)
    return result
