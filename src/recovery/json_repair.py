"""Recover structured values from malformed LLM responses.

Models asked for JSON routinely wrap it in prose or markdown fences, get cut
off by the token limit, emit trailing commas, curly quotes or invalid escape
sequences such as \\- \\. \\: inside strings. This module runs the response
through a fixed chain of repair stages and either returns the parsed value
or a ``RecoveryFailure`` describing where recovery stopped.

Pipeline:
    strip fence -> extract boundary -> sanitize -> balance -> parse attempts

Rewrites are applied per lexical span: a lenient lexer separates string
literals (an unterminated string is a valid state) from structural text so
that trailing-comma and quote rules never touch string content.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from loguru import logger

from recovery.text_boundary import (
    DEFAULT_EXCERPT_CHARS,
    excerpt,
    find_object_span,
    find_outer_span,
    strip_code_fence,
)

JsonValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

Replacement = Union[str, Callable[[re.Match], str]]
Rule = Tuple[re.Pattern, Replacement]


class FailureKind(str, Enum):
    """Why recovery gave up."""

    EMPTY_INPUT = "empty_input"
    BOUNDARY_NOT_FOUND = "boundary_not_found"
    SYNTAX_UNRECOVERABLE = "syntax_unrecoverable"
    SCHEMA_MISMATCH = "schema_mismatch"


@dataclass(frozen=True)
class RecoveryFailure:
    """Typed failure returned instead of a value.

    Attributes:
        kind: Failure class.
        stage: Pipeline stage that stopped recovery ("input", "boundary", "parse", ...).
        excerpt: Bounded excerpt of the offending text.
        message: Native parser / validator message.
    """

    kind: FailureKind
    stage: str
    excerpt: str
    message: str


class StructuredValueError(ValueError):
    """Raised when an LLM response cannot be interpreted as a structured value."""

    def __init__(self, failure: RecoveryFailure) -> None:
        self.failure = failure
        super().__init__(
            f"Could not interpret AI response ({failure.kind.value} at stage "
            f"'{failure.stage}'): {failure.message}"
        )


# ---------------------------------------------------------------------------
# Rule tables (read-only)
# ---------------------------------------------------------------------------

# Control characters other than JSON whitespace, C1 controls and the BOM
_CONTROL_CHARS = r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff]"

# Valid JSON escapes: \", \\, \/, \b, \f, \n, \r, \t, \uXXXX. Any other
# backslash (e.g. \-, \., \:, \') is invalid and loses its backslash.
_INVALID_ESCAPE_RE = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})?')


def _replace_invalid_escape(match: re.Match) -> str:
    """Keep valid escapes, drop the backslash of invalid ones."""
    return match.group(0) if match.group(1) else ""


STRUCTURAL_RULES: Tuple[Rule, ...] = (
    (re.compile(_CONTROL_CHARS), ""),
    (re.compile("[\u2018\u2019\u201a\u201b]"), "'"),
    (re.compile(r",(\s*[}\]])"), r"\1"),
)

STRING_RULES: Tuple[Rule, ...] = (
    (re.compile(_CONTROL_CHARS), ""),
    (_INVALID_ESCAPE_RE, _replace_invalid_escape),
    (re.compile("\n"), r"\\n"),
    (re.compile("\r"), r"\\r"),
    (re.compile("\t"), r"\\t"),
)

# Broader rewrites tried only after the targeted repairs fail to parse
RELAXED_RULES: Tuple[Rule, ...] = (
    (re.compile(r"(?<!\\)'"), '"'),
    (re.compile(r"([{,]\s*)([A-Za-z_$][A-Za-z0-9_$-]*)\s*:"), r'\1"\2":'),
    (re.compile(r",(\s*,)+"), ","),
    (re.compile(r"\bTrue\b"), "true"),
    (re.compile(r"\bFalse\b"), "false"),
    (re.compile(r"\bNone\b"), "null"),
)

# Double quotes that may open a string; a string opened by a curly quote
# also closes on a curly quote.
_OPEN_QUOTES = "\"\u201c\u201d\u201e"
_CURLY_CLOSERS = "\"\u201c\u201d"

# A curly quote ends a straight-quoted string only where structure follows it
_STRUCTURE_FOLLOWS_RE = re.compile(r"\s*(?:[,:}\]]|\Z)")

_CLOSER_FOR = {"{": "}", "[": "]"}
_OPENER_FOR = {"}": "{", "]": "["}


# ---------------------------------------------------------------------------
# Lenient lexer
# ---------------------------------------------------------------------------

class _Segment(NamedTuple):
    is_string: bool
    text: str
    closed: bool = True


def _lex(text: str) -> List[_Segment]:
    """Split text into alternating structural and string-literal segments.

    String segments hold the literal's content without delimiters. The last
    segment is an unclosed string when the text ends inside a literal.
    """
    segments: List[_Segment] = []
    buf: List[str] = []
    in_string = False
    curly = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if not in_string:
            if ch in _OPEN_QUOTES:
                segments.append(_Segment(False, "".join(buf)))
                buf = []
                in_string = True
                curly = ch != '"'
            else:
                buf.append(ch)
            i += 1
            continue

        if ch == "\\" and i + 1 < n:
            buf.append(text[i:i + 2])
            i += 2
            continue
        if ch == '"' or (
            ch in _CURLY_CLOSERS and (curly or _STRUCTURE_FOLLOWS_RE.match(text, i + 1))
        ):
            segments.append(_Segment(True, "".join(buf)))
            buf = []
            in_string = False
        else:
            buf.append(ch)
        i += 1

    segments.append(_Segment(in_string, "".join(buf), closed=not in_string))
    return segments


def _join(segments: List[_Segment]) -> str:
    parts = []
    for seg in segments:
        if seg.is_string:
            parts.append('"' + seg.text + ('"' if seg.closed else ""))
        else:
            parts.append(seg.text)
    return "".join(parts)


def _apply_rules(text: str, rules: Tuple[Rule, ...]) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def sanitize_json_text(text: str) -> str:
    """Apply the character-sanitation rules span by span.

    Curly double quotes used as string delimiters come out as straight
    quotes; curly quotes inside a straight-quoted string are left alone.
    """
    segments = [
        _Segment(
            seg.is_string,
            _apply_rules(seg.text, STRING_RULES if seg.is_string else STRUCTURAL_RULES),
            seg.closed,
        )
        for seg in _lex(text)
    ]
    return _join(segments)


def relax_json_text(text: str) -> str:
    """Apply the broad rewrite rules to structural spans, then re-sanitize."""
    segments = [
        seg if seg.is_string else _Segment(False, _apply_rules(seg.text, RELAXED_RULES))
        for seg in _lex(text)
    ]
    return sanitize_json_text(_join(segments))


def balance_delimiters(text: str) -> str:
    """Append the closers a truncated structure is missing.

    Only appends: an open string literal gets its closing quote, then every
    unclosed ``{``/``[`` is closed innermost first. Unmatched closers are
    left in place for the parser to reject.
    """
    segments = _lex(text)
    stack: List[str] = []
    for seg in segments:
        if seg.is_string:
            continue
        for ch in seg.text:
            if ch in _CLOSER_FOR:
                stack.append(ch)
            elif ch in _OPENER_FOR and stack and stack[-1] == _OPENER_FOR[ch]:
                stack.pop()

    suffix = "" if segments[-1].closed else '"'
    suffix += "".join(_CLOSER_FOR[ch] for ch in reversed(stack))
    return text + suffix


def _unwrap_string_literal(text: str) -> str:
    """Decode a response that is itself a JSON string holding JSON."""
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(decoded, str):
        return strip_code_fence(decoded)
    return text


def _boundaries(text: str) -> List[str]:
    """Spans to recover from, in the order they are tried.

    A response that starts with ``[`` is tried as a top-level array first.
    The object span from the first ``{`` follows whenever one exists, so a
    bracketed preamble such as ``[INFO]`` does not hide the object.
    """
    unfenced = _unwrap_string_literal(strip_code_fence(text))
    spans = []
    if unfenced.startswith("["):
        spans.append(find_object_span(unfenced, "["))
    spans.append(find_object_span(unfenced, "{"))

    boundaries: List[str] = []
    for span in spans:
        if span is None:
            continue
        candidate = unfenced[span[0]:span[1]]
        if candidate not in boundaries:
            boundaries.append(candidate)
    return boundaries


def _candidates(prepared: str) -> List[Tuple[str, Callable[[], Optional[str]]]]:
    """Parse candidates in the order they are tried; built lazily."""
    sanitized = sanitize_json_text(prepared)

    def narrowed() -> Optional[str]:
        span = find_outer_span(sanitized)
        if span is None:
            return None
        return balance_delimiters(sanitized[span[0]:span[1]])

    return [
        ("verbatim", lambda: prepared),
        ("balanced", lambda: balance_delimiters(sanitized)),
        ("resanitized", lambda: sanitize_json_text(balance_delimiters(sanitized))),
        ("narrowed", narrowed),
        ("relaxed", lambda: balance_delimiters(relax_json_text(sanitized))),
    ]


def recover_structured_value(
    text: Any, excerpt_limit: int = DEFAULT_EXCERPT_CHARS
) -> Union[JsonValue, RecoveryFailure]:
    """Recover a structured value from raw model output.

    Args:
        text: Raw model response. Anything that is not a non-blank string is
              reported as empty input.
        excerpt_limit: Maximum characters of offending text kept in a failure.

    Returns:
        The parsed value, or a RecoveryFailure. Never raises for str input.
    """
    if not isinstance(text, str) or not text.strip():
        return RecoveryFailure(
            kind=FailureKind.EMPTY_INPUT,
            stage="input",
            excerpt="",
            message="response is empty or not text",
        )

    boundaries = _boundaries(text)
    if not boundaries:
        return RecoveryFailure(
            kind=FailureKind.BOUNDARY_NOT_FOUND,
            stage="boundary",
            excerpt=excerpt(strip_code_fence(text), excerpt_limit),
            message="no '{' found in response",
        )

    first_error: Optional[str] = None
    first_candidate = ""
    tried = set()

    for prepared in boundaries:
        for label, build in _candidates(prepared):
            candidate = build()
            if candidate is None or candidate in tried:
                continue
            tried.add(candidate)
            try:
                value = json.loads(candidate)
            except (json.JSONDecodeError, RecursionError) as e:
                # RecursionError: nesting deeper than the decoder can follow
                logger.debug(f"JSON candidate '{label}' rejected: {e}")
                if first_error is None:
                    first_error = str(e)
                    first_candidate = candidate
                continue
            if label not in ("verbatim", "balanced"):
                logger.debug(f"JSON recovered via '{label}' candidate")
            return value

    return RecoveryFailure(
        kind=FailureKind.SYNTAX_UNRECOVERABLE,
        stage="parse",
        excerpt=excerpt(first_candidate, excerpt_limit),
        message=first_error or "no parseable candidate",
    )


def parse_structured_value(text: Any, excerpt_limit: int = DEFAULT_EXCERPT_CHARS) -> JsonValue:
    """Like ``recover_structured_value`` but raises ``StructuredValueError`` on failure."""
    result = recover_structured_value(text, excerpt_limit=excerpt_limit)
    if isinstance(result, RecoveryFailure):
        raise StructuredValueError(result)
    return result
