"""Markdown content negotiation.

Decides, per request, whether a markdown-preferring client should be
served from the internal markdown path. Two checks, both required:

1. the Accept header contains a markdown media type;
2. the request path matches a configured route pattern.

The rewrite target is ``internal_prefix + path``. Parameters are not
reassembled; the markdown handler re-matches the path itself.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote, unquote, urlsplit

from mdnegotiate.config import DEFAULT_INTERNAL_PREFIX, MARKDOWN_TYPES, NegotiationConfig
from mdnegotiate.errors import ConfigurationError
from mdnegotiate.http.request import Request
from mdnegotiate.http.response import Response
from mdnegotiate.routing.matcher import MatcherCache, default_cache
from mdnegotiate.routing.pattern import validate_pattern
from mdnegotiate.versions import MarkdownVersion

logger = logging.getLogger("mdnegotiate.negotiation")


class HeaderLookup(Protocol):
    def get(self, key: str, /) -> str | None: ...


class NegotiableRequest(Protocol):
    """Anything with case-insensitive ``headers.get()`` and a ``url``.

    A request that also carries a decoded ``path`` (ASGI style) is matched
    on that path; otherwise the path is taken from ``url``.
    """

    @property
    def headers(self) -> HeaderLookup: ...

    @property
    def url(self) -> str: ...


@dataclass(frozen=True, slots=True)
class NegotiateOptions:
    """Routes eligible for markdown and where to send them."""

    routes: tuple[str, ...]
    internal_prefix: str = DEFAULT_INTERNAL_PREFIX

    def validate(self) -> None:
        """Validate every route and the prefix. Raises ``ConfigurationError``."""
        if not self.internal_prefix.startswith("/") or self.internal_prefix.endswith("/"):
            msg = (
                f"internal_prefix must start with '/' and not end with one, "
                f"got {self.internal_prefix!r}."
            )
            raise ConfigurationError(msg)
        for route in self.routes:
            validate_pattern(route)


def request_path(request: NegotiableRequest) -> str:
    """The path a request is matched on, never normalized.

    ``url`` is only split when it is absolute; a bare ``//host/x`` stays
    a path and does not lose its first segment to a network location.
    """
    path = getattr(request, "path", None)
    if isinstance(path, str):
        return path
    url = request.url
    parts = urlsplit(url)
    if parts.scheme:
        return unquote(parts.path) or "/"
    return url.partition("?")[0] or "/"


def accepts_markdown(accept: str) -> bool:
    """True if *accept* contains any recognized markdown media type.

    Substring containment, not a media-range parse: q-values are
    ignored and ``text/markdownish`` also matches.
    """
    return any(media_type in accept for media_type in MARKDOWN_TYPES)


def negotiate_request(
    request: NegotiableRequest,
    options: NegotiateOptions,
    *,
    cache: MatcherCache | None = None,
) -> str | None:
    """Return the internal rewrite path for *request*, or ``None`` to pass through.

    Routes are tried in registration order; the first match wins.
    Never raises for options that passed ``NegotiateOptions.validate``.
    """
    accept = request.headers.get("accept") or ""
    if not accepts_markdown(accept):
        return None

    if cache is None:
        cache = default_cache()
    path = request_path(request)
    for route in options.routes:
        if cache.match(route, path) is not None:
            target = f"{options.internal_prefix}{path}"
            logger.debug("Rewriting %s -> %s (route %s)", path, target, route)
            return target
    return None


class RequestNegotiator:
    """A negotiator bound to validated options.

    Construction validates every route, so a bad pattern fails at setup
    instead of on the first markdown request::

        negotiate = RequestNegotiator(NegotiateOptions(routes=("/blog/[slug]",)))
        negotiate(request)  # "/md-api/blog/hello" or None
    """

    __slots__ = ("_cache", "options")

    def __init__(self, options: NegotiateOptions, *, cache: MatcherCache | None = None) -> None:
        options.validate()
        self.options = options
        self._cache = cache if cache is not None else MatcherCache()
        for route in options.routes:
            self._cache.get(route)

    @classmethod
    def from_routes(
        cls,
        routes: Iterable[str],
        *,
        config: NegotiationConfig | None = None,
        cache: MatcherCache | None = None,
    ) -> "RequestNegotiator":
        cfg = config or NegotiationConfig()
        options = NegotiateOptions(routes=tuple(routes), internal_prefix=cfg.internal_prefix)
        return cls(options, cache=cache)

    def __call__(self, request: NegotiableRequest) -> str | None:
        return negotiate_request(request, self.options, cache=self._cache)


class MarkdownNegotiator:
    """Header-based rewrite adapter for edge runtimes.

    Returns an empty ``Response`` carrying the absolute rewrite URL in the
    configured rewrite header (``x-middleware-rewrite``), or ``None`` to let
    the request pass through untouched.
    """

    __slots__ = ("config", "negotiator")

    def __init__(
        self,
        routes: Iterable[str],
        *,
        config: NegotiationConfig | None = None,
        cache: MatcherCache | None = None,
    ) -> None:
        self.config = config or NegotiationConfig()
        self.negotiator = RequestNegotiator.from_routes(routes, config=self.config, cache=cache)

    def __call__(self, request: Request) -> Response | None:
        target = self.negotiator(request)
        if target is None:
            return None
        return Response(body="").with_header(
            self.config.rewrite_header, f"{request.origin}{quote(target)}"
        )


def create_markdown_negotiator(
    routes: Iterable[str],
    *,
    config: NegotiationConfig | None = None,
) -> MarkdownNegotiator:
    """Create a header-based negotiator for a list of route patterns."""
    return MarkdownNegotiator(routes, config=config)


def create_negotiator_from_config(
    versions: Iterable[MarkdownVersion],
    *,
    config: NegotiationConfig | None = None,
) -> MarkdownNegotiator:
    """Create a negotiator straight from a markdown version registry."""
    return MarkdownNegotiator([version.pattern for version in versions], config=config)
