"""Tests for mdnegotiate.server.middleware — negotiation in front of an ASGI app."""

import pytest

from mdnegotiate.config import NegotiationConfig
from mdnegotiate.errors import ConfigurationError, InvalidPatternError
from mdnegotiate.server.middleware import MarkdownApp, MarkdownRewriteMiddleware, rewrite_scope
from mdnegotiate.testing import TestClient
from mdnegotiate.versions import MarkdownRegistry


async def html_app(scope, receive, send) -> None:
    """Echo the path it was called with as an HTML page."""
    body = f"<h1>{scope['path']}</h1>".encode()
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"text/html; charset=utf-8")],
        }
    )
    await send({"type": "http.response.body", "body": body})


def _registry() -> MarkdownRegistry:
    registry = MarkdownRegistry()

    @registry.version("/products/[productId]")
    def product(params: dict[str, str]) -> str:
        return f"# Product {params['productId']}"

    return registry


class TestRewriteScope:
    def test_copies(self) -> None:
        scope = {"type": "http", "path": "/a", "raw_path": b"/a"}
        rewritten = rewrite_scope(scope, "/md-api/a")

        assert rewritten["path"] == "/md-api/a"
        assert rewritten["raw_path"] == b"/md-api/a"
        assert scope["path"] == "/a"


class TestMarkdownRewriteMiddleware:
    @pytest.mark.anyio
    async def test_rewrites_markdown_requests(self) -> None:
        app = MarkdownRewriteMiddleware(html_app, ["/products/[productId]"])
        response = await TestClient(app).markdown("/products/abc")

        assert response.text == "<h1>/md-api/products/abc</h1>"

    @pytest.mark.anyio
    async def test_leaves_html_requests(self) -> None:
        app = MarkdownRewriteMiddleware(html_app, ["/products/[productId]"])
        response = await TestClient(app).get("/products/abc", accept="text/html")

        assert response.text == "<h1>/products/abc</h1>"

    @pytest.mark.anyio
    async def test_leaves_unmatched_routes(self) -> None:
        app = MarkdownRewriteMiddleware(html_app, ["/products/[productId]"])
        response = await TestClient(app).markdown("/about")

        assert response.text == "<h1>/about</h1>"

    def test_validates_routes(self) -> None:
        with pytest.raises(InvalidPatternError):
            MarkdownRewriteMiddleware(html_app, ["products"])

    @pytest.mark.anyio
    async def test_non_http_passes_through(self) -> None:
        seen: list[dict] = []

        async def app(scope, receive, send) -> None:
            seen.append(scope)

        async def receive() -> dict:
            return {}

        async def send(message: dict) -> None:
            pass

        middleware = MarkdownRewriteMiddleware(app, ["/products/[productId]"])
        scope = {"type": "lifespan"}
        await middleware(scope, receive, send)
        assert seen == [scope]


class TestMarkdownApp:
    @pytest.mark.anyio
    async def test_same_url_two_representations(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))

        html = await client.get("/products/abc", accept="text/html,application/xhtml+xml")
        markdown = await client.markdown("/products/abc")

        assert html.content_type == "text/html; charset=utf-8"
        assert html.text == "<h1>/products/abc</h1>"
        assert markdown.status == 200
        assert markdown.content_type == "text/markdown; charset=utf-8"
        assert markdown.text == "# Product abc"

    @pytest.mark.anyio
    async def test_unregistered_route_goes_to_app(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))
        response = await client.markdown("/about")

        assert response.text == "<h1>/about</h1>"

    @pytest.mark.anyio
    async def test_internal_prefix_served_directly(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))
        response = await client.get("/md-api/products/xyz")

        assert response.text == "# Product xyz"

    @pytest.mark.anyio
    async def test_internal_prefix_unknown_route(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))
        response = await client.get("/md-api/nope")

        assert response.status == 404

    @pytest.mark.anyio
    async def test_custom_prefix(self) -> None:
        config = NegotiationConfig(internal_prefix="/_markdown")
        client = TestClient(MarkdownApp(html_app, _registry(), config=config))

        assert (await client.markdown("/products/1")).text == "# Product 1"
        assert (await client.get("/_markdown/products/2")).text == "# Product 2"
        assert (await client.get("/md-api/products/3")).text == "<h1>/md-api/products/3</h1>"

    @pytest.mark.anyio
    async def test_query_string_kept_off_target(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))
        response = await client.markdown("/products/abc?utm=1")

        assert response.text == "# Product abc"


class TestPathHandling:
    def test_raw_path_is_percent_encoded(self) -> None:
        rewritten = rewrite_scope({"type": "http"}, "/md-api/products/a?b c")

        assert rewritten["path"] == "/md-api/products/a?b c"
        assert rewritten["raw_path"] == b"/md-api/products/a%3Fb%20c"

    @pytest.mark.anyio
    async def test_encoded_question_mark_reaches_producer(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))
        response = await client.markdown("/products/a%3Fb")

        assert response.text == "# Product a?b"

    @pytest.mark.anyio
    async def test_double_slash_path_not_negotiated(self) -> None:
        client = TestClient(MarkdownApp(html_app, _registry()))
        response = await client.markdown("//evil.com/products/secret")

        assert response.text == "<h1>//evil.com/products/secret</h1>"

    @pytest.mark.anyio
    async def test_middleware_keeps_decoded_path(self) -> None:
        app = MarkdownRewriteMiddleware(html_app, ["/products/[productId]"])
        response = await TestClient(app).markdown("/products/a%3Fb")

        assert response.text == "<h1>/md-api/products/a?b</h1>"


class TestLateRegistration:
    @pytest.mark.anyio
    async def test_version_added_after_wrapping(self) -> None:
        registry = _registry()
        client = TestClient(MarkdownApp(html_app, registry))

        @registry.version("/pricing")
        def pricing(params: dict[str, str]) -> str:
            return "# Pricing"

        response = await client.markdown("/pricing")

        assert response.status == 200
        assert response.text == "# Pricing"

    def test_invalid_prefix_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            MarkdownApp(html_app, _registry(), config=NegotiationConfig(internal_prefix="md"))
