"""Generators that turn repository data into model-produced artifacts."""

from generators.analysis import CodeAnalysisGenerator
from generators.documentation import DocumentationGenerator
from generators.sdlc import SdlcGenerator
from generators.test_cases import TestCaseGenerator

__all__ = [
    "CodeAnalysisGenerator",
    "DocumentationGenerator",
    "SdlcGenerator",
    "TestCaseGenerator",
]
