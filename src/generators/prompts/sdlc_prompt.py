"""Prompt template for the SDLC methodology generator."""

from infra.models import ProjectData

SDLC_SYSTEM = (
    "You are a senior software architect and SDLC strategist. You pick "
    "development methodologies from concrete project constraints and explain "
    "the trade-offs of the options you reject."
)

METHODOLOGIES = (
    ("Agile", "iterative development with continuous feedback and adaptation"),
    ("Scrum", "sprints and cross-functional teams within Agile"),
    ("Kanban", "visual workflow management with continuous delivery"),
    ("Waterfall", "sequential phases with comprehensive upfront planning"),
    ("DevOps", "development and operations integrated with continuous deployment"),
    ("Lean", "waste elimination and value stream optimization"),
    ("Spiral", "risk-driven iterations with prototyping"),
    ("V-Model", "sequential development paired with verification and validation"),
)


def build_sdlc_prompt(project: ProjectData) -> str:
    """Build the user prompt for the SDLC methodology generator.

    Args:
        project: Questionnaire answers describing the project.

    Returns:
        Formatted user prompt string.
    """
    options = "\n".join(f"- **{name}**: {summary}" for name, summary in METHODOLOGIES)

    return f"""### PROJECT OVERVIEW
Name: {project.name}
Description: {project.description}
Type: {project.type}
Team Size: {project.team_size}
Timeline: {project.timeline}
Complexity Level: {project.complexity}
Key Features: {project.key_features}
Risk Factors: {project.risk_factors}
Requirements: {project.requirements}
Additional Context: {project.additional_context}

### INSTRUCTIONS
Select the best-fit SDLC methodology for this project from:
{options}

Weigh team size and collaboration needs, requirement stability, technical
complexity, risk tolerance, compliance and documentation needs, and schedule
flexibility.

1. **recommended**: the chosen methodology name.
2. **reasoning**: why it fits this project better than the others.
3. **phases**: the ordered phases the team should follow.
4. **alternatives**: the other serious candidates with a suitabilityScore from 0 to 100.

### OUTPUT FORMAT
Respond ONLY with valid JSON, no markdown and no explanations:
{{
    "recommended": "...",
    "reasoning": "...",
    "phases": ["..."],
    "alternatives": [
        {{
            "name": "...",
            "suitabilityScore": number,
            "pros": ["..."],
            "cons": ["..."],
            "additionalConsiderations": "..."
        }}
    ]
}}"""
