"""Prompt templates for the generators."""

from generators.prompts.analysis_prompt import ANALYSIS_SYSTEM, build_analysis_prompt
from generators.prompts.documentation_prompt import (
    DOCUMENTATION_SYSTEM,
    README_SYSTEM,
    build_documentation_prompt,
    build_readme_prompt,
)
from generators.prompts.sdlc_prompt import SDLC_SYSTEM, build_sdlc_prompt
from generators.prompts.test_case_prompt import (
    TEST_CASE_SYSTEM,
    build_test_case_prompt,
    format_source_files,
)

__all__ = [
    "ANALYSIS_SYSTEM",
    "DOCUMENTATION_SYSTEM",
    "README_SYSTEM",
    "SDLC_SYSTEM",
    "TEST_CASE_SYSTEM",
    "build_analysis_prompt",
    "build_documentation_prompt",
    "build_readme_prompt",
    "build_sdlc_prompt",
    "build_test_case_prompt",
    "format_source_files",
]
