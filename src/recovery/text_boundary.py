"""Fence stripping and boundary helpers shared by both recovery pipelines."""

import re
from typing import Iterator, Optional, Tuple

# Opening fence: three backticks plus an optional language tag on the same line
_OPENING_FENCE_RE = re.compile(r"^```[ \t]*[\w+.-]*[ \t]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?[ \t]*```[ \t]*$")

_FENCED_BLOCK_RE = re.compile(
    r"```[ \t]*(?P<lang>[\w+.-]*)[ \t]*\n(?P<body>.*?)\n?[ \t]*```",
    re.DOTALL,
)

DEFAULT_EXCERPT_CHARS = 500

_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapping the whole text.

    The opening fence may carry a language tag (```json, ```mermaid).
    A missing closing fence is tolerated since truncated responses
    frequently lose it. Text that does not start with a fence is only
    trimmed.
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    stripped = _OPENING_FENCE_RE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE_RE.sub("", stripped, count=1)
    return stripped.strip()


def extract_fenced_block(text: str, language: Optional[str] = None) -> Optional[str]:
    """Return the body of the first fenced block, or None if there is none."""
    for match in iter_fenced_blocks(text, language):
        return match.group("body")
    return None


def iter_fenced_blocks(markdown: str, language: Optional[str] = None) -> Iterator[re.Match]:
    """Yield fenced block matches, optionally only those tagged with ``language``."""
    for match in _FENCED_BLOCK_RE.finditer(markdown):
        if language is None or match.group("lang").lower() == language.lower():
            yield match


def excerpt(text: str, limit: int = DEFAULT_EXCERPT_CHARS) -> str:
    """Bounded excerpt of ``text`` for error payloads and log lines."""
    if len(text) <= limit:
        return text
    return text[:limit]


def find_object_span(text: str, openers: str = "{") -> Optional[Tuple[int, int]]:
    """Locate the first structure opened by one of ``openers`` and its matching closer.

    The scan skips delimiters inside string literals. When the structure
    never closes (truncated output) the span runs to the end of the text.

    Returns:
        (start, end) slice bounds, or None when no opener is present.
    """
    start = -1
    for i, ch in enumerate(text):
        if ch in openers:
            start = i
            break
    if start == -1:
        return None

    open_char = text[start]
    close_char = _CLOSERS[open_char]
    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(text)):
        ch = text[i]
        if escape_next:
            escape_next = False
            continue
        if ch == "\\":
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return start, i + 1

    return start, len(text)


def find_outer_span(text: str, openers: str = "{[", closers: str = "}]") -> Optional[Tuple[int, int]]:
    """First opener to last closer, ignoring string literals entirely."""
    starts = [pos for pos in (text.find(ch) for ch in openers) if pos != -1]
    ends = [text.rfind(ch) for ch in closers]
    if not starts:
        return None
    start = min(starts)
    end = max(ends)
    if end <= start:
        return None
    return start, end + 1
