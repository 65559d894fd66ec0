"""Tests for prompt budgeting helpers."""

from infra.models import SourceFile
from infra.text_processing import (
    TRUNCATION_MARKER,
    InputProcessor,
    chunk_text,
    estimate_token_count,
    is_code_file,
    select_source_files,
    summarize_object,
    truncate_to_tokens,
)


def test_estimate_token_count() -> None:
    assert estimate_token_count("") == 0
    # 2 words * 0.75 = 1.5, 11 chars / 4 = 2.75 -> ceil(2.125) = 3
    assert estimate_token_count("hello world") == 3


def test_chunk_text_fits() -> None:
    assert chunk_text("short text", max_tokens=100) == ["short text"]
    assert chunk_text("") == []


def test_chunk_text_splits_on_paragraphs() -> None:
    paragraphs = ["word " * 40 for _ in range(5)]
    chunks = chunk_text("\n\n".join(paragraphs), max_tokens=60)
    assert len(chunks) > 1
    assert all(estimate_token_count(chunk) <= 60 for chunk in chunks)


def test_chunk_text_splits_long_paragraph_on_sentences() -> None:
    paragraph = " ".join(f"Sentence number {i} is here." for i in range(60))
    chunks = chunk_text(paragraph, max_tokens=50)
    assert len(chunks) > 1
    assert chunks[0].startswith("Sentence number 0")


def test_truncate_to_tokens() -> None:
    assert truncate_to_tokens("small", 100) == "small"
    cut = truncate_to_tokens("abcd" * 100, 10)
    assert cut == "abcd" * 10 + "..."


def test_summarize_object() -> None:
    data = {"text": "x" * 300, "items": list(range(15)), "deep": {"a": {"b": {"c": {"d": 1}}}}}
    result = summarize_object(data)
    assert result["text"] == "x" * 200 + "..."
    assert result["items"][-1] == "[+5 more items]"
    assert len(result["items"]) == 11
    assert result["deep"]["a"]["b"]["c"] == "[Max depth reached]"


class TestInputProcessor:

    def test_text_within_budget(self) -> None:
        processed = InputProcessor(max_tokens=100).process_text("fits easily")
        assert processed.content == "fits easily"
        assert processed.is_truncated is False
        assert processed.chunks is None

    def test_text_over_budget_keeps_first_chunk(self) -> None:
        text = "\n\n".join("word " * 40 for _ in range(10))
        processed = InputProcessor(max_tokens=100, chunk_size=60).process_text(text)
        assert processed.is_truncated is True
        assert processed.content == processed.chunks[0]
        assert len(processed.chunks) > 1

    def test_data_summarized_when_large(self) -> None:
        data = {"files": ["f" * 500 for _ in range(50)]}
        processed = InputProcessor(max_tokens=1000, chunk_size=500).process_data(data)
        assert processed.is_truncated is True
        assert "more items" in processed.content


class TestSourceSelection:

    def test_is_code_file(self) -> None:
        assert is_code_file("src/app.py")
        assert is_code_file("README.md")
        assert not is_code_file("node_modules/lib/index.js")
        assert not is_code_file("static/images/logo.png")
        assert not is_code_file("")

    def test_skips_short_and_non_code_files(self) -> None:
        files = [
            SourceFile(path="a.py", content="print('hello world')"),
            SourceFile(path="b.py", content="   x  "),
            SourceFile(path="logo.png", content="binarybinarybinary"),
        ]
        assert [f.path for f in select_source_files(files, code_only=True)] == ["a.py"]
        assert [f.path for f in select_source_files(files)] == ["a.py", "logo.png"]

    def test_short_file_cutoff(self) -> None:
        files = [
            SourceFile(path="ten.py", content="  " + "x" * 10 + "\n"),
            SourceFile(path="eleven.py", content="x" * 11),
        ]
        assert [f.path for f in select_source_files(files)] == ["eleven.py"]

    def test_limits_and_truncation(self) -> None:
        files = [SourceFile(path=f"m{i}.py", content="y" * 50) for i in range(10)]
        selected = select_source_files(files, max_files=3, max_chars=20)
        assert len(selected) == 3
        assert selected[0].content == "y" * 20 + TRUNCATION_MARKER
        # inputs are not mutated
        assert files[0].content == "y" * 50
