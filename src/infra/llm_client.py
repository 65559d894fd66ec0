"""Boundary to the model-calling component.

The component that actually talks to a language model lives outside this
project. Generators depend only on ``BaseLLMClient``: anything that can turn
chat messages into raw response text plugs in here, and the recovery
pipeline never learns how that text was produced.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class LLMClientError(Exception):
    """Raised on LLM API errors (rate limiting, network, etc.)."""
    pass


class BaseLLMClient(ABC):
    """Interface every LLM provider implementation must satisfy.

    Generators depend only on this interface, not on any concrete class.
    Swap providers by passing a different implementation at construction time.
    """

    model: str = "unknown"

    @abstractmethod
    async def complete_text(
        self,
        messages: List[Dict[str, str]],
        request_context: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Call the LLM and return the raw text response.

        Args:
            messages: Chat messages with 'role' and 'content'.
            request_context: Optional label for log messages.
            temperature: Per-call temperature override.

        Returns:
            Raw text content from the model, not guaranteed to be well-formed.

        Raises:
            LLMClientError: On API failures including rate limiting.
        """
