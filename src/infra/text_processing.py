"""Keep prompt material within the model's context budget.

Token counts are estimates: different models tokenize differently, so the
figures here only need to be in the right ballpark.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from infra.models import SourceFile

TRUNCATION_MARKER = "\n...(truncated)"

_CODE_EXTENSIONS = (
    ".js", ".ts", ".jsx", ".tsx", ".vue", ".svelte", ".html", ".css", ".scss",
    ".sass", ".py", ".java", ".c", ".cpp", ".cs", ".php", ".rb", ".go", ".rs",
    ".kt", ".swift", ".sh", ".json", ".yaml", ".yml", ".xml", ".md", ".txt",
)

_EXCLUDED_DIRECTORIES = (
    "node_modules/", "dist/", "build/", "target/", "bin/", "obj/", ".git/",
    ".vscode/", ".idea/", "__pycache__/", "coverage/", "vendor/",
    "assets/images/", "static/images/", "images/", "img/",
)

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")
_PARAGRAPH_RE = re.compile(r"\n\s*\n")


def estimate_token_count(text: str) -> int:
    """Approximate token count: mean of the word-based and char-based estimates."""
    if not text:
        return 0
    tokens_from_words = len(text.split()) * 0.75
    tokens_from_chars = len(text) / 4
    return math.ceil((tokens_from_words + tokens_from_chars) / 2)


def chunk_text(text: str, max_tokens: int = 2000) -> List[str]:
    """Split text into chunks of at most ``max_tokens`` estimated tokens.

    Paragraph boundaries are preferred; a paragraph that is too large on its
    own is split at sentence boundaries.
    """
    if not text:
        return []
    if estimate_token_count(text) <= max_tokens:
        return [text]

    chunks: List[str] = []
    current: List[str] = []
    current_tokens = 0

    for paragraph in _PARAGRAPH_RE.split(text):
        paragraph_tokens = estimate_token_count(paragraph)

        if paragraph_tokens > max_tokens:
            if current:
                chunks.append("\n\n".join(current))
                current, current_tokens = [], 0
            chunks.extend(_chunk_sentences(paragraph, max_tokens))
        elif current and current_tokens + paragraph_tokens > max_tokens:
            chunks.append("\n\n".join(current))
            current, current_tokens = [paragraph], paragraph_tokens
        else:
            current.append(paragraph)
            current_tokens += paragraph_tokens

    if current:
        chunks.append("\n\n".join(current))
    return chunks


def _chunk_sentences(paragraph: str, max_tokens: int) -> List[str]:
    chunks: List[str] = []
    current: List[str] = []
    current_tokens = 0
    for sentence in _SENTENCE_END_RE.split(paragraph):
        sentence_tokens = estimate_token_count(sentence)
        if current and current_tokens + sentence_tokens > max_tokens:
            chunks.append(" ".join(current))
            current, current_tokens = [], 0
        current.append(sentence)
        current_tokens += sentence_tokens
    if current:
        chunks.append(" ".join(current))
    return chunks


def truncate_to_tokens(text: str, max_tokens: int = 1000) -> str:
    """Cut text to roughly ``max_tokens`` tokens, marking the cut with '...'."""
    if not text:
        return ""
    if estimate_token_count(text) <= max_tokens:
        return text
    max_chars = max_tokens * 4
    return text[:max_chars] + "..." if len(text) > max_chars else text


def summarize_object(
    obj: Any,
    max_string_length: int = 200,
    max_array_length: int = 10,
    max_depth: int = 3,
    _depth: int = 0,
) -> Any:
    """Shrink a JSON-like object: long strings cut, long lists capped, deep nesting elided."""
    if _depth > max_depth:
        return "[Max depth reached]"
    if obj is None:
        return None
    if isinstance(obj, str):
        if len(obj) > max_string_length:
            return obj[:max_string_length] + "..."
        return obj
    if isinstance(obj, (list, tuple)):
        items = [
            summarize_object(item, max_string_length, max_array_length, max_depth, _depth + 1)
            for item in obj[:max_array_length]
        ]
        if len(obj) > max_array_length:
            items.append(f"[+{len(obj) - max_array_length} more items]")
        return items
    if isinstance(obj, dict):
        return {
            key: summarize_object(value, max_string_length, max_array_length, max_depth, _depth + 1)
            for key, value in obj.items()
        }
    return obj


@dataclass
class ProcessedInput:
    """Prompt material after budget enforcement."""

    content: str
    is_truncated: bool
    token_count: int
    chunks: Optional[List[str]] = None


class InputProcessor:
    """Fits text and JSON-like data into a token budget before prompting."""

    def __init__(self, max_tokens: int = 8000, chunk_size: int = 2000) -> None:
        """
        Args:
            max_tokens: Maximum tokens allowed in a single request.
            chunk_size: Maximum tokens per chunk when splitting is needed.
        """
        self.max_tokens = max_tokens
        self.chunk_size = min(chunk_size, max_tokens)

    def process_text(self, content: str) -> ProcessedInput:
        """Return the text itself when it fits, else its first chunk plus all chunks."""
        token_count = estimate_token_count(content)
        if token_count <= self.max_tokens:
            return ProcessedInput(content=content, is_truncated=False, token_count=token_count)

        chunks = chunk_text(content, self.chunk_size)
        first = chunks[0]
        return ProcessedInput(
            content=first,
            is_truncated=True,
            token_count=estimate_token_count(first),
            chunks=chunks,
        )

    def process_data(self, data: Any, summarize: bool = True) -> ProcessedInput:
        """Serialize ``data`` to JSON within budget, summarizing or cutting when too large."""
        content = json.dumps(data, default=str)
        if estimate_token_count(content) <= self.max_tokens:
            return ProcessedInput(
                content=content,
                is_truncated=False,
                token_count=estimate_token_count(content),
            )

        if summarize:
            content = json.dumps(summarize_object(data), default=str)
        if estimate_token_count(content) > self.max_tokens:
            content = content[: self.chunk_size * 4]

        return ProcessedInput(
            content=content,
            is_truncated=True,
            token_count=estimate_token_count(content),
        )


def is_code_file(path: str) -> bool:
    """True for source/config/doc files worth showing to the model."""
    if not path:
        return False
    lower = path.lower()
    if any(directory in lower for directory in _EXCLUDED_DIRECTORIES):
        return False
    return lower.endswith(_CODE_EXTENSIONS)


def select_source_files(
    files: Sequence[SourceFile],
    max_files: int = 6,
    max_chars: int = 2000,
    code_only: bool = False,
) -> List[SourceFile]:
    """Pick the files to include in a prompt, truncating long ones.

    Files whose trimmed content is 10 characters or shorter are skipped.
    """
    selected: List[SourceFile] = []
    for f in files:
        if len(f.content.strip()) <= 10:
            continue
        if code_only and not is_code_file(f.path):
            continue
        content = f.content
        if len(content) > max_chars:
            content = content[:max_chars] + TRUNCATION_MARKER
        selected.append(SourceFile(path=f.path, content=content))
        if len(selected) >= max_files:
            break
    return selected
