"""Prompt template for the code analysis generator."""

import json

from infra.models import ProjectStructure

ANALYSIS_SYSTEM = (
    "You are a senior software engineer and code quality auditor. You evaluate "
    "codebases from their structural metrics and give grounded, non-generic "
    "assessments that a tech lead can act on."
)


def build_analysis_prompt(structure: ProjectStructure) -> str:
    """Build the user prompt for the code analysis generator.

    Args:
        structure: Metrics from the structural analyzer.

    Returns:
        Formatted user prompt string.
    """
    frameworks = ", ".join(structure.patterns.framework) or "None detected"

    return f"""### CODEBASE OVERVIEW
Total Files: {structure.total_files}
Total Lines of Code: {structure.total_lines}
Languages Used: {json.dumps(structure.languages)}
Test Coverage: {structure.test_coverage}%
Average Cyclomatic Complexity: {structure.complexity.average}
Architecture Pattern: {structure.patterns.architecture}
Frameworks Detected: {frameworks}
Reported Issues: {len(structure.issues)}

### INSTRUCTIONS
Perform a critical analysis of the codebase from the data above:

1. **strengths**: clear, non-generic strengths grounded in the observed architecture and technology choices.
2. **weaknesses**: complexity hotspots, test gaps and risk factors that drive maintenance overhead.
3. **recommendations**: targeted steps for maintainability, readability, performance and test coverage.
4. **qualityScore** and **maintainabilityIndex**: numbers from 0 to 100 based on structure, complexity and coverage.

### OUTPUT FORMAT
Respond ONLY with valid JSON, no markdown and no explanations:
{{
    "qualityScore": number,
    "strengths": ["..."],
    "weaknesses": ["..."],
    "recommendations": ["..."],
    "maintainabilityIndex": number
}}"""
