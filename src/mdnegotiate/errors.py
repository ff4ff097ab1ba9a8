"""md-negotiate exception hierarchy.

Shared across the pattern compiler, negotiator, handler, and CLI so every
module raises and catches the same types.
"""


class MdNegotiateError(Exception):
    """Base for all md-negotiate errors."""


class ConfigurationError(MdNegotiateError):
    """Raised when negotiation setup is invalid.

    Always raised at construction time (registry, negotiator, rewrite
    generation), never while serving a request.
    """


class InvalidPatternError(ConfigurationError):
    """A route pattern does not follow the ``/literal/[param]/[...rest]`` grammar."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            f"Invalid route pattern: {pattern!r}. {reason} "
            "Patterns must start with / and use [param] or [...param] for dynamic segments."
        )


class HandlerExecutionError(MdNegotiateError):
    """A markdown producer raised while rendering a route.

    The original exception is chained as ``__cause__``. The ASGI handler
    logs it and answers with a generic 500; the detail never reaches
    the response body.
    """

    def __init__(self, pattern: str, path: str) -> None:
        self.pattern = pattern
        self.path = path
        super().__init__(f"Markdown handler for {pattern!r} failed on {path!r}")
