"""Insert a rewrites registration into a JavaScript/TypeScript config file.

Pure text to text, no parser. The patcher recognizes a closed list of
shapes and refuses everything else:

1. an existing ``rewrites()`` method whose first ``return`` is
   - an object literal without ``beforeFiles``: ``beforeFiles`` is added
     as its first property;
   - an array literal: the array becomes ``afterFiles`` next to the new
     ``beforeFiles`` in an object literal, entries untouched;
2. no ``rewrites`` at all, and a config object found as
   - ``export default { ... }``;
   - ``const name[: Type] = { ... }`` referenced by ``export default name``
     or ``module.exports = name``;
   - ``module.exports = { ... }``;
   in which case a whole ``async rewrites()`` method is added.

Anything else yields an ``UNSUPPORTED`` result and the text is left
alone. Braces inside strings or comments and keywords inside comments
can mislead the scan. When the pieces do not line up the patcher
refuses instead of guessing.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from mdnegotiate.patching.scanner import (
    char_at,
    excerpt,
    find_keyword,
    line_indent,
    match_bracket,
    skip_whitespace,
)
from mdnegotiate.patching.snippets import INDENT, PatchSnippet, new_config_text

logger = logging.getLogger("mdnegotiate.patching")

_REWRITES_FUNCTION_RE = re.compile(r"(?:\basync\s+)?\brewrites\s*\(\s*\)\s*(?::\s*[^{]+?)?\{")
_REWRITES_WORD_RE = re.compile(r"\brewrites\b")
_BEFORE_FILES_RE = re.compile(r"\bbeforeFiles\b")
_DEFAULT_EXPORT_OBJECT_RE = re.compile(r"\bexport\s+default\s*\{")
_EXPORT_REFERENCE_RES = (
    re.compile(r"\bexport\s+default\s+([A-Za-z_$][\w$]*)\s*;?\s*$", re.MULTILINE),
    re.compile(r"\bmodule\.exports\s*=\s*([A-Za-z_$][\w$]*)\s*;?\s*$", re.MULTILINE),
)
_MODULE_EXPORTS_OBJECT_RE = re.compile(r"\bmodule\.exports\s*=\s*\{")

# Identifiers that can follow ``export default`` without naming a variable
_NOT_VARIABLES = frozenset({"async", "class", "function", "new", "await"})


class Shape(Enum):
    """Where the new registration goes."""

    OBJECT_RETURN = "object-return"
    ARRAY_RETURN = "array-return"
    OBJECT_LITERAL = "object-literal"
    UNRESOLVED = "unresolved"


class PatchStatus(Enum):
    PATCHED = "patched"
    ALREADY_PATCHED = "already-patched"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class InsertionPoint:
    """A location in the config text and the shape around it.

    ``offset`` is just past the opening ``{`` or at the opening ``[``;
    ``end`` is just past the matching ``]`` for array returns.
    """

    offset: int
    shape: Shape
    end: int | None = None
    reason: str = ""

    @classmethod
    def unresolved(cls, reason: str) -> "InsertionPoint":
        return cls(offset=-1, shape=Shape.UNRESOLVED, reason=reason)


@dataclass(frozen=True, slots=True)
class PatchResult:
    """Outcome of a patch attempt.

    ``text`` is the updated source for ``PATCHED`` and the untouched
    input otherwise. The caller persists it.
    """

    status: PatchStatus
    text: str
    shape: Shape = Shape.UNRESOLVED
    reason: str = ""

    @property
    def changed(self) -> bool:
        return self.status is PatchStatus.PATCHED

    @property
    def ok(self) -> bool:
        return self.status is not PatchStatus.UNSUPPORTED


# -- Locating ----------------------------------------------------------------


def locate_rewrites_return(text: str) -> InsertionPoint | None:
    """Find the return value of an existing ``rewrites()`` method.

    Returns ``None`` when no such method exists, an ``UNRESOLVED`` point
    when it exists but its return value is not a literal we handle.
    """
    function = _REWRITES_FUNCTION_RE.search(text)
    if function is None:
        return None

    body_open = function.end() - 1
    body_end = match_bracket(text, body_open)
    if body_end is None:
        return InsertionPoint.unresolved("rewrites() body has unbalanced braces")

    return_pos = find_keyword(text, "return", function.end(), body_end)
    if return_pos is None:
        return InsertionPoint.unresolved("rewrites() has no return statement")

    value_pos = skip_whitespace(text, return_pos + len("return"))
    value = char_at(text, value_pos)

    if value == "{":
        object_end = match_bracket(text, value_pos)
        if object_end is None:
            return InsertionPoint.unresolved("rewrites() returns an object with unbalanced braces")
        if _BEFORE_FILES_RE.search(text, value_pos, object_end):
            return InsertionPoint.unresolved("rewrites() already returns a beforeFiles key")
        return InsertionPoint(offset=value_pos + 1, shape=Shape.OBJECT_RETURN)

    if value == "[":
        array_end = match_bracket(text, value_pos)
        if array_end is None:
            return InsertionPoint.unresolved("rewrites() returns an array with unbalanced brackets")
        return InsertionPoint(offset=value_pos, shape=Shape.ARRAY_RETURN, end=array_end)

    return InsertionPoint.unresolved(
        f"rewrites() returns {excerpt(text, value_pos)!r}, expected an object or array literal"
    )


def _declaration_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"\b(?:const|let|var)\s+{re.escape(name)}\s*(?::\s*[^=;]+?)?\s*=\s*\{{"
    )


def locate_config_object(text: str) -> InsertionPoint | None:
    """Find the opening brace of the exported config object."""
    direct = _DEFAULT_EXPORT_OBJECT_RE.search(text)
    if direct is not None:
        return InsertionPoint(offset=direct.end(), shape=Shape.OBJECT_LITERAL)

    for reference_re in _EXPORT_REFERENCE_RES:
        for reference in reference_re.finditer(text):
            name = reference.group(1)
            if name in _NOT_VARIABLES:
                continue
            declaration = _declaration_re(name).search(text, 0, reference.start())
            if declaration is not None:
                return InsertionPoint(offset=declaration.end(), shape=Shape.OBJECT_LITERAL)

    exports = _MODULE_EXPORTS_OBJECT_RE.search(text)
    if exports is not None:
        return InsertionPoint(offset=exports.end(), shape=Shape.OBJECT_LITERAL)

    return None


def find_insertion_point(text: str) -> InsertionPoint:
    """Pick where to insert, in priority order. Never raises."""
    point = locate_rewrites_return(text)
    if point is not None:
        return point

    if _REWRITES_WORD_RE.search(text):
        return InsertionPoint.unresolved(
            "found 'rewrites' but not as a no-argument rewrites() method"
        )

    point = locate_config_object(text)
    if point is not None:
        return point

    return InsertionPoint.unresolved(
        "no rewrites() method and no config object "
        "(tried 'export default {', an exported 'const name = {', 'module.exports = {')"
    )


# -- Applying ----------------------------------------------------------------


def _continuation(text: str, offset: int, indent: str) -> tuple[str, int]:
    """Line break after an insertion and the offset the old text resumes at.

    Text already on its own line is left alone. A closing ``}`` moves to
    *indent*; any other same-line content moves to the member indent.
    """
    resume = offset
    while char_at(text, resume) in (" ", "\t"):
        resume += 1
    following = char_at(text, resume)
    if following in ("", "\n", "\r"):
        return "", offset
    if following == "}":
        return "\n" + indent, resume
    return "\n" + indent + INDENT, resume


def _apply(text: str, point: InsertionPoint, snippet: PatchSnippet) -> str:
    indent = line_indent(text, point.offset)
    if point.shape is Shape.OBJECT_RETURN:
        gap, resume = _continuation(text, point.offset, indent)
        insertion = "\n" + snippet.entry(indent + INDENT) + gap
        return text[: point.offset] + insertion + text[resume:]

    if point.shape is Shape.ARRAY_RETURN:
        assert point.end is not None
        original = text[point.offset : point.end]
        inner = indent + INDENT
        replacement = "\n".join(
            [
                "{",
                snippet.entry(inner),
                f"{inner}afterFiles: {original},",
                f"{indent}}}",
            ]
        )
        return text[: point.offset] + replacement + text[point.end :]

    gap, resume = _continuation(text, point.offset, indent)
    insertion = "\n" + snippet.method(indent + INDENT) + gap
    return text[: point.offset] + insertion + text[resume:]


def patch_config(text: str, snippet: PatchSnippet) -> PatchResult:
    """Insert *snippet* into config source *text*.

    Idempotent: text that already contains the snippet's marker comes
    back unchanged as ``ALREADY_PATCHED``.
    """
    if snippet.marker in text:
        logger.debug("Config already contains %r", snippet.marker)
        return PatchResult(status=PatchStatus.ALREADY_PATCHED, text=text)

    point = find_insertion_point(text)
    if point.shape is Shape.UNRESOLVED:
        logger.debug("Config patch refused: %s", point.reason)
        return PatchResult(status=PatchStatus.UNSUPPORTED, text=text, reason=point.reason)

    logger.debug("Patching config at offset %d (%s)", point.offset, point.shape.value)
    updated = snippet.import_block(text) + _apply(text, point, snippet)
    return PatchResult(status=PatchStatus.PATCHED, text=updated, shape=point.shape)


class ConfigPatcher:
    """A patcher bound to one snippet.

    Usage::

        patcher = ConfigPatcher(rewrites_snippet(rules))
        result = patcher.patch(Path("next.config.ts").read_text())
        if result.changed:
            Path("next.config.ts").write_text(result.text)
    """

    __slots__ = ("snippet",)

    def __init__(self, snippet: PatchSnippet) -> None:
        self.snippet = snippet

    def patch(self, text: str) -> PatchResult:
        return patch_config(text, self.snippet)

    def new_config(self) -> str:
        """Config text for when no config file exists yet."""
        return new_config_text(self.snippet)
