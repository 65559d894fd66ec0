"""Prompt templates for the documentation generator."""

from typing import List

DOCUMENTATION_SYSTEM = (
    "You are a senior software architect and documentation expert. You write "
    "design documentation grounded only in the code you are shown."
)

README_SYSTEM = (
    "You are a technical writer producing GitHub README files. You return "
    "plain markdown only."
)

_DIAGRAM_RULES = (
    "Mermaid diagrams MUST start with a diagram type (flowchart TD, graph LR, "
    "sequenceDiagram). Use only alphanumeric node IDs (A, B, Module1, Service2) "
    "and plain arrows (A --> B, A --- B). Put descriptive text in labels: "
    "A[User] --> B[Frontend]."
)


def build_documentation_prompt(
    repository_name: str,
    language: str,
    file_paths: List[str],
    source_listing: str,
) -> str:
    """Build the user prompt for structured design documentation.

    Args:
        repository_name: Repository shown to the model.
        language: Primary language of the repository.
        file_paths: Paths of the files included in ``source_listing``.
        source_listing: Pre-formatted (and budget-trimmed) file contents.

    Returns:
        Formatted user prompt string.
    """
    paths = ", ".join(file_paths)

    return f"""### PROJECT
Repository: {repository_name}
Language: {language}
Files Analyzed: {paths}

### SOURCE
{source_listing}

### INSTRUCTIONS
Document the real structure, architecture, components and workflows of this
codebase. Every section must be grounded in the files above.

{_DIAGRAM_RULES}

### OUTPUT FORMAT
Respond ONLY with valid JSON, no markdown and no explanations:
{{
    "summary": "Brief overview of the project",
    "architecture": {{
        "pattern": "Architecture pattern name",
        "description": "Explanation of the architecture",
        "technologies": ["tech1", "tech2"],
        "layers": [{{"name": "Layer", "description": "Role", "components": ["c1"]}}]
    }},
    "components": [
        {{"name": "Name", "type": "Component|Service|Utility", "file": "path",
          "description": "Scope", "dependencies": ["dep"], "exports": ["export"]}}
    ],
    "apis": [
        {{"endpoint": "/api/path", "method": "GET", "description": "What it does",
          "response": "Response shape"}}
    ],
    "functions": [{{"name": "fn", "file": "path", "description": "What it does"}}],
    "dataModels": [{{"name": "Model", "file": "path", "properties": []}}],
    "examples": [{{"title": "Title", "code": "Example code"}}],
    "mermaidDiagram": "flowchart TD\\nA[User] --> B[Frontend]"
}}"""


def build_readme_prompt(repository_name: str, language: str, source_listing: str) -> str:
    """Build the user prompt for a README in plain markdown.

    Args:
        repository_name: Repository shown to the model; used as the title.
        language: Primary language of the repository.
        source_listing: Pre-formatted (and budget-trimmed) file contents.

    Returns:
        Formatted user prompt string.
    """
    return f"""### PROJECT
Repository: {repository_name}
Language: {language}

### SOURCE
{source_listing}

### INSTRUCTIONS
Write a README for this repository with an overview, features, installation,
usage and project structure. Include one architecture diagram in a
```mermaid code block. {_DIAGRAM_RULES}

Return ONLY the markdown, starting with "# {repository_name}". Do not wrap it
in JSON or quotes."""
