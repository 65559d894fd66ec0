"""Documentation generator — design documentation and README markdown."""

import re
from typing import Optional

from loguru import logger

from infra.models import Documentation, ProjectStructure
from generators.base import BaseGenerator
from generators.prompts import (
    DOCUMENTATION_SYSTEM,
    README_SYSTEM,
    build_documentation_prompt,
    build_readme_prompt,
)
from recovery.diagram import normalize_embedded_diagrams
from recovery.json_repair import (
    FailureKind,
    RecoveryFailure,
    StructuredValueError,
    recover_structured_value,
)
from recovery.text_boundary import strip_code_fence
from utils.config import settings

_README_KEYS = ("README.md", "readme", "README", "content", "markdown")
_MARKDOWN_FENCE_RE = re.compile(r"^```[ \t]*(?:markdown|md)?[ \t]*\n", re.IGNORECASE)


class DocumentationGenerator(BaseGenerator):
    """Generates structured design documentation and README files."""

    async def generate(
        self,
        structure: ProjectStructure,
        language: str,
        repository_name: str,
    ) -> Documentation:
        """Return structured documentation for the repository.

        The mermaid diagram in the result is always renderable; see
        ``recovery.diagram.normalize_diagram``.

        Raises:
            LLMClientError: When the client call fails.
            StructuredValueError: When the response cannot be interpreted.
        """
        selected, listing = self._source_listing(structure.files)
        prompt = build_documentation_prompt(
            repository_name=repository_name,
            language=language,
            file_paths=[f.path for f in selected],
            source_listing=listing,
        )
        messages = [
            {"role": "system", "content": DOCUMENTATION_SYSTEM},
            {"role": "user", "content": prompt},
        ]
        docs = await self._recover(messages, Documentation, request_context=f"docs:{repository_name}")

        logger.info(
            f"DOCUMENTED [{repository_name}]: components={len(docs.components)}, "
            f"apis={len(docs.apis)}, examples={len(docs.examples)}"
        )
        return docs

    async def generate_readme(
        self,
        structure: ProjectStructure,
        language: str,
        repository_name: str,
    ) -> str:
        """Return README markdown for the repository.

        The model is asked for plain markdown but sometimes answers with a
        JSON wrapper such as {"README.md": "..."} or a ```markdown fence;
        both are unwrapped. Embedded mermaid blocks are normalized.

        Raises:
            LLMClientError: When the client call fails.
            StructuredValueError: When the response is empty.
        """
        context = f"readme:{repository_name}"
        _, listing = self._source_listing(structure.files)
        messages = [
            {"role": "system", "content": README_SYSTEM},
            {
                "role": "user",
                "content": build_readme_prompt(repository_name, language, listing),
            },
        ]
        response_text = await self._complete(messages, request_context=context)

        markdown = extract_readme_markdown(response_text)
        if not markdown:
            failure = RecoveryFailure(
                kind=FailureKind.EMPTY_INPUT,
                stage="input",
                excerpt="",
                message="README response is empty",
            )
            self._log_failure(failure, context)
            raise StructuredValueError(failure)

        readme = normalize_embedded_diagrams(markdown)
        logger.info(f"README GENERATED [{repository_name}]: {len(readme)} chars")
        return readme


def extract_readme_markdown(response_text: Optional[str]) -> str:
    """Unwrap README markdown from a raw model response.

    Args:
        response_text: Raw response; plain markdown, a ```markdown fence,
                       or a JSON object holding the markdown under a README key.

    Returns:
        The markdown, stripped. Empty string when there is none.
    """
    if not isinstance(response_text, str):
        return ""
    text = response_text.strip()

    if text.startswith("{"):
        value = recover_structured_value(text, excerpt_limit=settings.recovery_excerpt_chars)
        if isinstance(value, dict):
            for key in _README_KEYS:
                if isinstance(value.get(key), str):
                    logger.debug(f"README unwrapped from JSON key '{key}'")
                    return value[key].strip()

    if _MARKDOWN_FENCE_RE.match(text):
        return strip_code_fence(text)
    return text
