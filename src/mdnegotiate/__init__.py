"""md-negotiate: one URL, HTML for browsers, markdown for machines.

Clients that send ``Accept: text/markdown`` get a markdown rendering of
the same route; everyone else gets the regular page.

Basic usage::

    from mdnegotiate import MarkdownApp, MarkdownRegistry

    registry = MarkdownRegistry()

    @registry.version("/products/[productId]")
    async def product(params):
        item = await get_product(params["productId"])
        return f"# {item.name}\\n\\n{item.description}"

    app = MarkdownApp(html_app, registry)

Rewrite rules for an external router::

    from mdnegotiate import create_rewrites_from_config
    rules = create_rewrites_from_config(registry)
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigPatcher",
    "ConfigurationError",
    "HandlerExecutionError",
    "InvalidPatternError",
    "MarkdownApp",
    "MarkdownHandler",
    "MarkdownNegotiator",
    "MarkdownRegistry",
    "MarkdownRewriteMiddleware",
    "MarkdownVersion",
    "MatcherCache",
    "MdNegotiateError",
    "NegotiateOptions",
    "NegotiationConfig",
    "RequestNegotiator",
    "RewriteRule",
    "create_markdown_negotiator",
    "create_markdown_rewrites",
    "create_md_handler",
    "create_negotiator_from_config",
    "create_rewrites_from_config",
    "match_path",
    "md_version",
    "negotiate_request",
    "validate_pattern",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import mdnegotiate`` fast while providing a clean top-level API.
    """
    if name == "NegotiationConfig":
        from mdnegotiate.config import NegotiationConfig

        return NegotiationConfig

    if name in ("MatcherCache", "match_path", "validate_pattern"):
        from mdnegotiate import routing as _routing

        return getattr(_routing, name)

    if name in ("RewriteRule", "create_markdown_rewrites", "create_rewrites_from_config"):
        from mdnegotiate import rewrites as _rewrites

        return getattr(_rewrites, name)

    if name in (
        "MarkdownNegotiator",
        "NegotiateOptions",
        "RequestNegotiator",
        "create_markdown_negotiator",
        "create_negotiator_from_config",
        "negotiate_request",
    ):
        from mdnegotiate import negotiation as _negotiation

        return getattr(_negotiation, name)

    if name in ("MarkdownRegistry", "MarkdownVersion", "md_version"):
        from mdnegotiate import versions as _versions

        return getattr(_versions, name)

    if name in ("MarkdownHandler", "create_md_handler"):
        from mdnegotiate.server import handler as _handler

        return getattr(_handler, name)

    if name in ("MarkdownApp", "MarkdownRewriteMiddleware"):
        from mdnegotiate.server import middleware as _middleware

        return getattr(_middleware, name)

    if name == "ConfigPatcher":
        from mdnegotiate.patching import ConfigPatcher

        return ConfigPatcher

    if name in (
        "ConfigurationError",
        "HandlerExecutionError",
        "InvalidPatternError",
        "MdNegotiateError",
    ):
        from mdnegotiate import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
