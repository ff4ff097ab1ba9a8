"""Tests for mdnegotiate.patching.snippets — inserted JavaScript text."""

import pytest

from mdnegotiate.patching.snippets import (
    REWRITES_MARKER,
    PatchSnippet,
    new_config_text,
    render_rules,
    rewrites_snippet,
)
from mdnegotiate.rewrites import create_markdown_rewrites


class TestPatchSnippet:
    def test_requires_marker(self) -> None:
        with pytest.raises(ValueError):
            PatchSnippet(expression="rules")

    def test_entry(self) -> None:
        snippet = PatchSnippet(expression=f"rules /* {REWRITES_MARKER} */")
        assert snippet.entry("  ") == f"  beforeFiles: rules /* {REWRITES_MARKER} */,"

    def test_entry_indents_multiline(self) -> None:
        snippet = PatchSnippet(expression=f"[\n  // {REWRITES_MARKER}\n]")
        assert snippet.entry("    ") == f"    beforeFiles: [\n      // {REWRITES_MARKER}\n    ],"

    def test_method(self) -> None:
        snippet = PatchSnippet(expression=f"rules /* {REWRITES_MARKER} */")
        assert snippet.method("  ").splitlines() == [
            "  async rewrites() {",
            "    return {",
            f"      beforeFiles: rules /* {REWRITES_MARKER} */,",
            "    };",
            "  },",
        ]

    def test_import_block_only_missing(self) -> None:
        snippet = PatchSnippet(
            expression=f"md /* {REWRITES_MARKER} */",
            imports=("import a from 'a';", "import b from 'b';"),
        )
        assert snippet.import_block("import a from 'a';\n") == "import b from 'b';\n"
        assert snippet.import_block("") == "import a from 'a';\nimport b from 'b';\n"


class TestRenderRules:
    def test_marker_leads(self) -> None:
        assert render_rules([]) == f"[\n  // {REWRITES_MARKER}\n]"

    def test_rule_lines(self) -> None:
        text = render_rules(create_markdown_rewrites(["/blog/[slug]"]))
        assert '    source: "/blog/:slug",' in text
        assert '    destination: "/md-api/blog/:slug",' in text
        assert "has: [{ type: 'header', key: \"accept\", value: " in text
        assert "text/x-markdown" in text

    def test_order(self) -> None:
        text = render_rules(create_markdown_rewrites(["/b", "/a"]))
        assert text.index('"/b"') < text.index('"/a"')

    def test_rewrites_snippet(self) -> None:
        snippet = rewrites_snippet(create_markdown_rewrites(["/about"]))
        assert snippet.marker == REWRITES_MARKER
        assert snippet.imports == ()


class TestNewConfigText:
    def test_exports_method(self) -> None:
        snippet = PatchSnippet(
            expression=f"rules /* {REWRITES_MARKER} */",
            imports=("import { rules } from './md';",),
        )
        assert new_config_text(snippet) == (
            "import { rules } from './md';\n"
            "export default {\n"
            "  async rewrites() {\n"
            "    return {\n"
            f"      beforeFiles: rules /* {REWRITES_MARKER} */,\n"
            "    };\n"
            "  },\n"
            "};\n"
        )
