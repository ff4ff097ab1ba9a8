"""Immutable HTTP request metadata.

Only what negotiation needs: method, path, headers, and enough of the
ASGI scope to rebuild the request URL. The body is never read.
"""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from mdnegotiate.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the decoded ASGI path and is what route patterns match
    against. ``url`` is the absolute, percent-encoded form.
    """

    method: str
    path: str
    headers: Headers
    query_string: bytes = b""
    scheme: str = "http"
    server: tuple[str, int] | None = None

    @property
    def origin(self) -> str:
        """``scheme://host[:port]`` from the Host header, falling back to the server address."""
        host = self.headers.get("host")
        if host is None and self.server is not None:
            name, port = self.server
            default_port = 443 if self.scheme in ("https", "wss") else 80
            host = name if port == default_port else f"{name}:{port}"
        return f"{self.scheme}://{host or 'localhost'}"

    @property
    def url(self) -> str:
        """Absolute request URL: origin, encoded path, and query string."""
        url = f"{self.origin}{quote(self.path)}"
        if self.query_string:
            return f"{url}?{self.query_string.decode('latin-1')}"
        return url

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> "Request":
        """Create a Request from an ASGI HTTP scope."""
        server = scope.get("server")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
        )
