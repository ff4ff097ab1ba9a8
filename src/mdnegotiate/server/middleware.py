"""ASGI adapters that apply negotiation in front of an application.

``MarkdownRewriteMiddleware`` only rewrites the scope path and hands the
request on; the wrapped app must serve the internal prefix itself.
``MarkdownApp`` bundles the rewrite with a ``MarkdownHandler`` so one
registry drives both::

    registry = MarkdownRegistry()

    @registry.version("/blog/[slug]")
    def post(params):
        return f"# {params['slug']}"

    app = MarkdownApp(html_app, registry)
"""

import logging
from collections.abc import Iterable
from urllib.parse import quote

from mdnegotiate._internal.asgi import ASGIApp, Receive, Scope, Send, is_http
from mdnegotiate.config import NegotiationConfig
from mdnegotiate.http.request import Request
from mdnegotiate.negotiation import NegotiateOptions, RequestNegotiator, negotiate_request
from mdnegotiate.routing.matcher import MatcherCache
from mdnegotiate.server.handler import MarkdownHandler
from mdnegotiate.versions import MarkdownRegistry

logger = logging.getLogger("mdnegotiate.server")


def rewrite_scope(scope: Scope, path: str) -> Scope:
    """Copy *scope* with its path replaced; the original is not mutated.

    ``raw_path`` carries the percent-encoded form, as servers send it.
    """
    return {**scope, "path": path, "raw_path": quote(path).encode("ascii")}


class MarkdownRewriteMiddleware:
    """Rewrite markdown requests for matching routes to the internal prefix.

    Non-HTTP scopes and requests that do not negotiate to markdown pass
    through unchanged.
    """

    __slots__ = ("app", "negotiator")

    def __init__(
        self,
        app: ASGIApp,
        routes: Iterable[str],
        *,
        config: NegotiationConfig | None = None,
        cache: MatcherCache | None = None,
    ) -> None:
        self.app = app
        self.negotiator = RequestNegotiator.from_routes(routes, config=config, cache=cache)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if is_http(scope):
            target = self.negotiator(Request.from_asgi(dict(scope)))
            if target is not None:
                logger.debug("Markdown rewrite %s -> %s", scope["path"], target)
                scope = rewrite_scope(scope, target)
        await self.app(scope, receive, send)


class MarkdownApp:
    """An application with a markdown variant for its registered routes.

    - markdown request on a registered route: served by the markdown handler
    - any request under the internal prefix: served by the markdown handler
    - everything else: passed to the wrapped app

    Routes are read from the registry on every request, so versions
    registered after wrapping are negotiated too.
    """

    __slots__ = ("_cache", "app", "config", "handler", "registry")

    def __init__(
        self,
        app: ASGIApp,
        registry: MarkdownRegistry,
        *,
        config: NegotiationConfig | None = None,
        cache: MatcherCache | None = None,
    ) -> None:
        self.app = app
        self.config = config or NegotiationConfig()
        self.registry = registry
        self.handler = MarkdownHandler(registry, config=self.config)
        self._cache = cache if cache is not None else MatcherCache()
        self._options().validate()

    def _options(self) -> NegotiateOptions:
        # Registry patterns are validated when they are added
        return NegotiateOptions(
            routes=tuple(self.registry.patterns),
            internal_prefix=self.config.internal_prefix,
        )

    def _is_internal(self, path: str) -> bool:
        prefix = self.config.internal_prefix
        return path == prefix or path.startswith(prefix + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not is_http(scope):
            await self.app(scope, receive, send)
            return

        if self._is_internal(scope["path"]):
            await self.handler(scope, receive, send)
            return

        target = negotiate_request(
            Request.from_asgi(dict(scope)), self._options(), cache=self._cache
        )
        if target is None:
            await self.app(scope, receive, send)
            return

        logger.debug("Markdown rewrite %s -> %s", scope["path"], target)
        await self.handler(rewrite_scope(scope, target), receive, send)
