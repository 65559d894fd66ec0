"""Tests for fence stripping and boundary helpers."""

import pytest

from recovery.text_boundary import (
    excerpt,
    extract_fenced_block,
    find_object_span,
    find_outer_span,
    iter_fenced_blocks,
    strip_code_fence,
)


class TestStripCodeFence:

    @pytest.mark.parametrize(
        "text",
        [
            '```json\n{"a": 1}\n```',
            '```\n{"a": 1}\n```',
            '  ```JSON  \n{"a": 1}\n```  ',
            '```json\n{"a": 1}',
            '{"a": 1}',
        ],
    )
    def test_variants(self, text: str) -> None:
        assert strip_code_fence(text) == '{"a": 1}'

    def test_inner_fence_untouched_when_not_wrapped(self) -> None:
        text = "See below\n```mermaid\nA --> B\n```"
        assert strip_code_fence(text) == text


class TestFencedBlocks:

    def test_extract_first_block(self) -> None:
        text = "intro\n```python\nprint(1)\n```\nmore\n```mermaid\nA --> B\n```"
        assert extract_fenced_block(text) == "print(1)"
        assert extract_fenced_block(text, "mermaid") == "A --> B"

    def test_no_block(self) -> None:
        assert extract_fenced_block("plain text") is None

    def test_iter_filters_language_case_insensitively(self) -> None:
        text = "```Mermaid\nA\n```\n```js\nB\n```\n```mermaid\nC\n```"
        bodies = [m.group("body") for m in iter_fenced_blocks(text, "mermaid")]
        assert bodies == ["A", "C"]


class TestSpans:

    def test_object_span_is_string_aware(self) -> None:
        text = 'x {"a": "}", "b": {"c": 1}} y'
        start, end = find_object_span(text)
        assert text[start:end] == '{"a": "}", "b": {"c": 1}}'

    def test_escaped_quote_inside_string(self) -> None:
        text = '{"a": "say \\"}\\" now"} tail'
        start, end = find_object_span(text)
        assert text[start:end] == '{"a": "say \\"}\\" now"}'

    def test_truncated_span_runs_to_end(self) -> None:
        text = 'prefix {"a": [1, 2'
        assert find_object_span(text) == (7, len(text))

    def test_no_opener(self) -> None:
        assert find_object_span("nothing") is None

    def test_array_opener(self) -> None:
        assert find_object_span("[[1], [2]] x", "[") == (0, 10)

    def test_outer_span(self) -> None:
        text = 'a [1] b {"c": 2} d'
        assert find_outer_span(text) == (2, 16)

    def test_outer_span_without_closer(self) -> None:
        assert find_outer_span('{"a": 1') is None


def test_excerpt_bounds_length() -> None:
    assert excerpt("abc", 10) == "abc"
    assert excerpt("x" * 50, 10) == "x" * 10
