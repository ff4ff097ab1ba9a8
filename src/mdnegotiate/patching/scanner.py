"""Text scanning helpers for the config patcher.

Character-level primitives only. None of these understand strings,
comments, or template literals; callers treat every result as a
heuristic and refuse when something does not line up.
"""

import re

_WORD_CHARS = re.compile(r"[\w$]")

BRACKET_PAIRS: dict[str, str] = {"[": "]", "{": "}", "(": ")"}


def _is_word_char(char: str) -> bool:
    return bool(char) and _WORD_CHARS.match(char) is not None


def skip_whitespace(text: str, pos: int) -> int:
    """Index of the first non-whitespace character at or after *pos*."""
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def char_at(text: str, pos: int) -> str:
    """Character at *pos*, or ``""`` past the end."""
    return text[pos] if 0 <= pos < len(text) else ""


def find_keyword(text: str, keyword: str, start: int = 0, end: int | None = None) -> int | None:
    """Index of the first whole-word *keyword* in ``text[start:end]``.

    ``returnValue`` and ``$return`` do not count as ``return``.
    """
    stop = len(text) if end is None else end
    pos = text.find(keyword, start, stop)
    while pos != -1:
        before = char_at(text, pos - 1)
        after = char_at(text, pos + len(keyword))
        if not _is_word_char(before) and not _is_word_char(after):
            return pos
        pos = text.find(keyword, pos + 1, stop)
    return None


def match_bracket(text: str, open_pos: int) -> int | None:
    """Index just past the bracket that closes the one at *open_pos*.

    Counts only the bracket kind found at *open_pos*: ``[`` increments,
    ``]`` decrements, other bracket kinds are ignored. Returns ``None``
    when the text ends before depth returns to zero.
    """
    opener = char_at(text, open_pos)
    closer = BRACKET_PAIRS.get(opener)
    if closer is None:
        msg = f"No bracket at offset {open_pos}: {opener!r}"
        raise ValueError(msg)

    depth = 0
    for index in range(open_pos, len(text)):
        char = text[index]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def line_indent(text: str, pos: int) -> str:
    """Leading whitespace of the line containing *pos*."""
    line_start = text.rfind("\n", 0, pos) + 1
    end = line_start
    while end < len(text) and text[end] in " \t":
        end += 1
    return text[line_start:end]


def excerpt(text: str, pos: int, width: int = 24) -> str:
    """Short single-line preview of the text at *pos*, for error messages."""
    snippet = text[pos : pos + width].split("\n", 1)[0]
    return snippet or "<end of file>"
