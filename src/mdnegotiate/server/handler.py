"""ASGI handler for the internal markdown path.

Requests arrive here after negotiation rewrote them to
``internal_prefix + original_path``. The handler strips the prefix,
resolves the remaining path against the markdown registry, and runs the
matching producer.

Outcomes:

- match, producer succeeds: 200 with ``text/markdown``
- match, producer raises: 500, generic body, error logged
- no match: 404
- method other than GET/HEAD: 405
"""

import logging

from mdnegotiate._internal.asgi import Receive, Scope, Send, is_http
from mdnegotiate.config import NegotiationConfig
from mdnegotiate.errors import HandlerExecutionError
from mdnegotiate.http.request import Request
from mdnegotiate.http.response import Response
from mdnegotiate.server.sender import send_response
from mdnegotiate.versions import MarkdownRegistry, render_version

logger = logging.getLogger("mdnegotiate.server")

_ALLOWED_METHODS = ("GET", "HEAD")


def strip_prefix(path: str, prefix: str) -> str:
    """Remove *prefix* from *path*; the remainder always starts with ``/``.

    ``strip_prefix("/md-api/blog/x", "/md-api")`` returns ``"/blog/x"``.
    Paths outside the prefix are returned unchanged.
    """
    if path == prefix:
        return "/"
    if path.startswith(prefix + "/"):
        return path[len(prefix) :]
    return path


class MarkdownHandler:
    """ASGI app serving the markdown version of registered routes.

    Usage::

        handler = MarkdownHandler(registry)
        # mount at /md-api, or wrap your app with MarkdownApp

    Producer errors never reach the response body; they are logged under
    the ``mdnegotiate.server`` logger.
    """

    __slots__ = ("config", "registry")

    def __init__(
        self,
        registry: MarkdownRegistry,
        *,
        config: NegotiationConfig | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or NegotiationConfig()

    async def handle(self, request: Request) -> Response:
        """Produce the response for *request* without touching ASGI."""
        if request.method not in _ALLOWED_METHODS:
            return (
                Response(body="Method Not Allowed", status=405)
                .with_header("Allow", ", ".join(_ALLOWED_METHODS))
            )

        path = strip_prefix(request.path, self.config.internal_prefix)
        resolved = self.registry.resolve(path)
        if resolved is None:
            logger.debug("404 %s %s: no markdown version", request.method, path)
            return Response(body="Not Found", status=404)

        version, params = resolved
        try:
            markdown = await render_version(
                version,
                params,
                path=path,
                in_thread=self.config.run_sync_in_thread,
            )
        except HandlerExecutionError:
            logger.exception("500 %s %s", request.method, path)
            return Response(body="Internal Server Error", status=500)

        return Response(
            body=markdown,
            content_type=self.config.content_type,
        ).with_header("Vary", "Accept")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not is_http(scope):
            msg = f"MarkdownHandler only serves HTTP scopes, got {scope.get('type')!r}"
            raise RuntimeError(msg)
        request = Request.from_asgi(dict(scope))
        response = await self.handle(request)
        await send_response(response, send, head=request.method == "HEAD")


def create_md_handler(
    registry: MarkdownRegistry,
    *,
    config: NegotiationConfig | None = None,
) -> MarkdownHandler:
    """Create the ASGI handler for the internal markdown path."""
    return MarkdownHandler(registry, config=config)
