"""Negotiation configuration.

NegotiationConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

# Internal path prefix the markdown handler is mounted under
DEFAULT_INTERNAL_PREFIX = "/md-api"

# Media types that signal a markdown preference in the Accept header
MARKDOWN_TYPES: tuple[str, ...] = (
    "text/markdown",
    "application/markdown",
    "text/x-markdown",
)


@dataclass(frozen=True, slots=True)
class NegotiationConfig:
    """Markdown negotiation configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = NegotiationConfig(internal_prefix="/_markdown")
    """

    # Internal path the markdown handler is mounted under
    internal_prefix: str = DEFAULT_INTERNAL_PREFIX

    # Response
    content_type: str = "text/markdown; charset=utf-8"

    # Header carrying the rewrite target for header-based edge runtimes
    rewrite_header: str = "x-middleware-rewrite"

    # Run synchronous markdown producers in a worker thread
    run_sync_in_thread: bool = True
