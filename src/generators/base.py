"""Base class for all generators.

Provides shared infrastructure:
    - LLM client injection
    - _complete(messages)  — raw text call with the configured temperature
    - _recover(messages, model_class)  — text call + structured-value recovery + validation
    - _source_listing(files)  — budget-trimmed file listing for prompts
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from infra.llm_client import BaseLLMClient
from infra.models import SourceFile
from infra.text_processing import InputProcessor, select_source_files
from generators.prompts import format_source_files
from recovery.json_repair import (
    FailureKind,
    RecoveryFailure,
    StructuredValueError,
    recover_structured_value,
)
from recovery.text_boundary import excerpt
from utils.config import settings


T = TypeVar("T", bound=BaseModel)


class BaseGenerator(ABC):
    """Abstract base for generators that turn repository data into model output."""

    def __init__(
        self,
        llm_client: BaseLLMClient,
        temperature: Optional[float] = None,
        input_processor: Optional[InputProcessor] = None,
    ) -> None:
        self.llm_client = llm_client
        self.temperature = (
            settings.generation_temperature if temperature is None else temperature
        )
        self.input_processor = input_processor or InputProcessor(
            max_tokens=settings.max_input_tokens,
            chunk_size=settings.chunk_tokens,
        )

    @abstractmethod
    async def generate(self, *args: Any, **kwargs: Any) -> Any:
        """Run the generator and return its validated result."""

    async def _complete(
        self,
        messages: List[Dict[str, str]],
        request_context: Optional[str] = None,
    ) -> str:
        return await self.llm_client.complete_text(
            messages,
            request_context=request_context,
            temperature=self.temperature,
        )

    async def _recover(
        self,
        messages: List[Dict[str, str]],
        model_class: Type[T],
        request_context: Optional[str] = None,
    ) -> T:
        """Call the LLM and recover a validated model instance from its text.

        Args:
            messages: Chat messages with 'role' and 'content'.
            model_class: Pydantic model class to validate the recovered value into.
            request_context: Optional label used in log messages.

        Returns:
            Validated instance of model_class.

        Raises:
            LLMClientError: When the client call fails.
            StructuredValueError: When the response cannot be recovered or does
                not match ``model_class``.
        """
        response_text = await self._complete(messages, request_context=request_context)
        result = recover_structured_value(
            response_text, excerpt_limit=settings.recovery_excerpt_chars
        )
        if isinstance(result, RecoveryFailure):
            self._log_failure(result, request_context)
            raise StructuredValueError(result)

        try:
            return model_class.model_validate(result)
        except ValidationError as e:
            failure = RecoveryFailure(
                kind=FailureKind.SCHEMA_MISMATCH,
                stage="validate",
                excerpt=excerpt(json.dumps(result, default=str), settings.recovery_excerpt_chars),
                message=str(e),
            )
            self._log_failure(failure, request_context)
            raise StructuredValueError(failure) from e

    def _source_listing(
        self, files: Sequence[SourceFile], code_only: bool = False
    ) -> Tuple[List[SourceFile], str]:
        """Select prompt files and render them within the input budget.

        Returns:
            (selected files, listing text)
        """
        selected = select_source_files(
            files,
            max_files=settings.max_prompt_files,
            max_chars=settings.max_file_chars,
            code_only=code_only,
        )
        processed = self.input_processor.process_text(format_source_files(selected))
        if processed.is_truncated:
            logger.debug(
                f"Prompt source listing trimmed to {processed.token_count} tokens "
                f"({len(processed.chunks or [])} chunks available)"
            )
        return selected, processed.content

    @staticmethod
    def _log_failure(failure: RecoveryFailure, request_context: Optional[str]) -> None:
        context_str = f" [{request_context}]" if request_context else ""
        logger.error(
            f"Could not interpret AI response{context_str}: {failure.kind.value} at "
            f"'{failure.stage}': {failure.message}"
        )
        if failure.excerpt:
            logger.debug(f"Offending response excerpt{context_str}:\n{failure.excerpt}")
