"""JavaScript snippets inserted by the config patcher.

A snippet is the ``beforeFiles`` expression plus a marker the patcher
looks for to detect an earlier patch, and any import lines the
expression depends on.
"""

import json as json_module
import textwrap
from collections.abc import Iterable
from dataclasses import dataclass

from mdnegotiate.rewrites import RewriteRule

REWRITES_MARKER = "md-negotiate:rewrites"

INDENT = "  "


@dataclass(frozen=True, slots=True)
class PatchSnippet:
    """What the patcher inserts.

    ``expression`` is a JavaScript expression evaluating to the rule
    array; it must contain ``marker`` so a patched file is recognized.
    """

    expression: str
    marker: str = REWRITES_MARKER
    imports: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.marker not in self.expression:
            msg = f"Snippet expression must contain its marker {self.marker!r}"
            raise ValueError(msg)

    def entry(self, indent: str) -> str:
        """``beforeFiles: <expression>,`` indented to *indent*."""
        body = textwrap.indent(self.expression, indent).lstrip()
        return f"{indent}beforeFiles: {body},"

    def method(self, indent: str) -> str:
        """A complete ``async rewrites()`` method returning the entry."""
        inner = indent + INDENT
        return "\n".join(
            [
                f"{indent}async rewrites() {{",
                f"{inner}return {{",
                self.entry(inner + INDENT),
                f"{inner}}};",
                f"{indent}}},",
            ]
        )

    def import_block(self, text: str) -> str:
        """Import lines not already present in *text*, newline-terminated."""
        missing = [line for line in self.imports if line not in text]
        return "".join(f"{line}\n" for line in missing)


def _js_string(value: str) -> str:
    return json_module.dumps(value)


def render_rules(rules: Iterable[RewriteRule]) -> str:
    """Render rules as a JavaScript array literal led by the marker comment."""
    lines = ["[", f"{INDENT}// {REWRITES_MARKER}"]
    for rule in rules:
        condition = rule.condition
        lines.extend(
            [
                f"{INDENT}{{",
                f"{INDENT * 2}source: {_js_string(rule.source)},",
                (
                    f"{INDENT * 2}has: [{{ type: 'header', key: {_js_string(condition.header)}, "
                    f"value: {_js_string(condition.value_matches)} }}],"
                ),
                f"{INDENT * 2}destination: {_js_string(rule.destination)},",
                f"{INDENT}}},",
            ]
        )
    lines.append("]")
    return "\n".join(lines)


def rewrites_snippet(rules: Iterable[RewriteRule]) -> PatchSnippet:
    """Snippet embedding *rules* as a literal array. Needs no imports."""
    return PatchSnippet(expression=render_rules(rules))


def new_config_text(snippet: PatchSnippet) -> str:
    """A fresh config module exporting only the rewrites method."""
    return f"{snippet.import_block('')}export default {{\n{snippet.method(INDENT)}\n}};\n"
