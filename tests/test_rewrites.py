"""Tests for mdnegotiate.rewrites — rewrite rule generation."""

import json

import pytest

from mdnegotiate.errors import InvalidPatternError
from mdnegotiate.rewrites import (
    MARKDOWN_ACCEPT_REGEX,
    HeaderCondition,
    RewriteRule,
    create_markdown_rewrites,
    create_rewrites_from_config,
    rules_to_json,
    to_rewrite_source,
)
from mdnegotiate.versions import MarkdownRegistry, md_version


class TestToRewriteSource:
    def test_static(self) -> None:
        assert to_rewrite_source("/about") == "/about"

    def test_param(self) -> None:
        assert to_rewrite_source("/products/[productId]") == "/products/:productId"

    def test_catch_all(self) -> None:
        assert to_rewrite_source("/docs/[...slug]") == "/docs/:slug*"

    def test_mixed(self) -> None:
        assert to_rewrite_source("/[org]/docs/[...path]") == "/:org/docs/:path*"


class TestCreateMarkdownRewrites:
    def test_one_rule_per_route(self) -> None:
        rules = create_markdown_rewrites(["/products/[productId]", "/docs/[...slug]"])
        assert rules == [
            RewriteRule(source="/products/:productId", destination="/md-api/products/:productId"),
            RewriteRule(source="/docs/:slug*", destination="/md-api/docs/:slug*"),
        ]

    def test_preserves_order(self) -> None:
        routes = ["/c", "/a", "/b/[id]"]
        assert [r.source for r in create_markdown_rewrites(routes)] == ["/c", "/a", "/b/:id"]

    def test_empty(self) -> None:
        assert create_markdown_rewrites([]) == []

    def test_custom_prefix(self) -> None:
        (rule,) = create_markdown_rewrites(["/blog/[slug]"], internal_prefix="/_md")
        assert rule.destination == "/_md/blog/:slug"

    def test_root(self) -> None:
        (rule,) = create_markdown_rewrites(["/"])
        assert rule.source == "/"
        assert rule.destination == "/md-api/"

    def test_condition(self) -> None:
        (rule,) = create_markdown_rewrites(["/about"])
        assert rule.condition == HeaderCondition(header="accept", value_matches=MARKDOWN_ACCEPT_REGEX)

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(InvalidPatternError):
            create_markdown_rewrites(["/ok", "missing-slash"])

    def test_accepts_generator(self) -> None:
        rules = create_markdown_rewrites(r for r in ("/a", "/b"))
        assert len(rules) == 2


class TestRuleShape:
    def test_to_dict(self) -> None:
        (rule,) = create_markdown_rewrites(["/products/[productId]"])
        assert rule.to_dict() == {
            "source": "/products/:productId",
            "has": [
                {
                    "type": "header",
                    "key": "accept",
                    "value": ".*(text/markdown|application/markdown|text/x-markdown).*",
                }
            ],
            "destination": "/md-api/products/:productId",
        }

    def test_rules_to_json(self) -> None:
        rules = create_markdown_rewrites(["/a", "/b/[id]"])
        decoded = json.loads(rules_to_json(rules))
        assert [r["source"] for r in decoded] == ["/a", "/b/:id"]
        assert decoded[1]["destination"] == "/md-api/b/:id"

    def test_rules_to_json_compact(self) -> None:
        text = rules_to_json(create_markdown_rewrites(["/a"]), indent=None)
        assert "\n" not in text

    def test_frozen(self) -> None:
        (rule,) = create_markdown_rewrites(["/a"])
        with pytest.raises(AttributeError):
            rule.source = "/b"  # type: ignore[misc]


class TestCreateRewritesFromConfig:
    def test_from_versions(self) -> None:
        versions = [
            md_version("/products/[productId]", lambda params: "p"),
            md_version("/docs/[...slug]", lambda params: "d"),
        ]
        rules = create_rewrites_from_config(versions)
        assert [r.source for r in rules] == ["/products/:productId", "/docs/:slug*"]

    def test_from_registry(self) -> None:
        registry = MarkdownRegistry()

        @registry.version("/blog/[slug]")
        def post(params: dict[str, str]) -> str:
            return "# post"

        (rule,) = create_rewrites_from_config(registry, internal_prefix="/markdown")
        assert rule.destination == "/markdown/blog/:slug"
