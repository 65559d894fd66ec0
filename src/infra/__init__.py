"""Provider-agnostic LLM infrastructure layer."""

from infra.llm_client import BaseLLMClient, LLMClientError
from infra.models import CodeAnalysis, Documentation, ProjectStructure, TestSuite

__all__ = ["BaseLLMClient", "LLMClientError", "CodeAnalysis", "Documentation", "ProjectStructure", "TestSuite"]
