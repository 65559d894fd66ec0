"""Shared Pydantic schemas for generator inputs and recovered responses.

Models reply in camelCase, so response fields carry camelCase aliases;
``populate_by_name`` lets Python callers use the snake_case names.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from recovery.diagram import normalize_diagram


def _clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


class _ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------------
# Generator input (structural analyzer output)
# ---------------------------------------------------------------------------

class SourceFile(BaseModel):
    """One file handed over by the structural analyzer."""

    path: str
    content: str = ""


class ComplexityStats(BaseModel):
    average: float = 0.0
    max: float = 0.0
    min: float = 0.0


class StructurePatterns(BaseModel):
    architecture: str = "Unknown"
    framework: List[str] = Field(default_factory=list)
    patterns: List[str] = Field(default_factory=list)


class ProjectStructure(BaseModel):
    """Repository metrics produced by the structural analyzer."""

    model_config = ConfigDict(populate_by_name=True)

    total_files: int = Field(default=0, alias="totalFiles")
    total_lines: int = Field(default=0, alias="totalLines")
    languages: Dict[str, int] = Field(default_factory=dict)
    complexity: ComplexityStats = Field(default_factory=ComplexityStats)
    test_coverage: float = Field(default=0.0, alias="testCoverage")
    issues: List[Dict[str, Any]] = Field(default_factory=list)
    patterns: StructurePatterns = Field(default_factory=StructurePatterns)
    files: List[SourceFile] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Code analysis
# ---------------------------------------------------------------------------

class CodeAnalysis(_ResponseModel):
    """Quality assessment returned by the analysis prompt."""

    quality_score: float = Field(
        alias="qualityScore",
        description="Holistic code quality score, 0-100",
    )
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    maintainability_index: float = Field(
        alias="maintainabilityIndex",
        description="Maintainability estimate from structure, complexity and coverage, 0-100",
    )

    @field_validator("quality_score", "maintainability_index")
    @classmethod
    def _within_range(cls, v: float) -> float:
        return _clamp_score(v)


# ---------------------------------------------------------------------------
# Test cases
# ---------------------------------------------------------------------------

class TestCase(_ResponseModel):
    """A single generated test case."""

    __test__ = False  # not a pytest class

    name: str
    description: str = ""
    code: str = ""
    type: str = Field(default="unit", description="unit, integration or e2e")
    priority: str = Field(default="medium", description="high, medium or low")
    file: str = ""

    @field_validator("type", "priority", mode="before")
    @classmethod
    def _lowercase(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class TestSuite(_ResponseModel):
    """Generated test plan for a repository."""

    __test__ = False

    test_cases: List[TestCase] = Field(default_factory=list, alias="testCases")
    coverage: float = Field(default=0.0, description="Estimated branch coverage, 0-100")
    framework: str = ""
    summary: str = ""

    @field_validator("coverage")
    @classmethod
    def _within_range(cls, v: float) -> float:
        return _clamp_score(v)


# ---------------------------------------------------------------------------
# SDLC recommendation
# ---------------------------------------------------------------------------

class ProjectData(BaseModel):
    """Project questionnaire used to pick a development methodology."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    type: str = ""
    team_size: str = Field(default="", alias="teamSize")
    timeline: str = ""
    complexity: str = ""
    requirements: str = ""
    key_features: str = Field(default="", alias="keyFeatures")
    risk_factors: str = Field(default="", alias="riskFactors")
    additional_context: str = Field(default="", alias="additionalContext")


class SdlcAlternative(_ResponseModel):
    """A methodology the model considered but did not recommend."""

    # The prompt asks for name/suitabilityScore; older replies use model/suitability
    model: str = Field(validation_alias=AliasChoices("model", "name"))
    suitability: float = Field(
        default=0.0,
        validation_alias=AliasChoices("suitability", "suitabilityScore"),
        description="Fit for the project, 0-100",
    )
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    additional_considerations: str = Field(default="", alias="additionalConsiderations")

    @field_validator("suitability")
    @classmethod
    def _within_range(cls, v: float) -> float:
        return _clamp_score(v)


class SdlcRecommendation(_ResponseModel):
    """Recommended methodology with reasoning, phases and ranked alternatives."""

    recommended: str
    reasoning: str = ""
    phases: List[str] = Field(default_factory=list)
    alternatives: List[SdlcAlternative] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Documentation
# ---------------------------------------------------------------------------

class ArchitectureLayer(_ResponseModel):
    name: str
    description: str = ""
    components: List[str] = Field(default_factory=list)


class Architecture(_ResponseModel):
    pattern: str = "Unknown"
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    layers: List[ArchitectureLayer] = Field(default_factory=list)


class Component(_ResponseModel):
    name: str
    type: str = ""
    file: str = ""
    description: str = ""
    dependencies: List[str] = Field(default_factory=list)
    exports: List[str] = Field(default_factory=list)


class ApiEndpoint(_ResponseModel):
    endpoint: str
    method: str = "GET"
    description: str = ""
    response: str = ""


class Documentation(BaseModel):
    """Design documentation returned by the documentation prompt.

    Sections without a dedicated model (codeInternals, sdlc, ...) are kept
    as extra fields. ``mermaidDiagram`` is normalized on validation so the
    renderer only ever sees drawable source.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    summary: str
    architecture: Architecture = Field(default_factory=Architecture)
    components: List[Component] = Field(default_factory=list)
    apis: List[ApiEndpoint] = Field(default_factory=list)
    functions: List[Dict[str, Any]] = Field(default_factory=list)
    data_models: List[Dict[str, Any]] = Field(default_factory=list, alias="dataModels")
    examples: List[Dict[str, Any]] = Field(default_factory=list)
    mermaid_diagram: Optional[str] = Field(default=None, alias="mermaidDiagram")

    @field_validator("mermaid_diagram")
    @classmethod
    def _normalize_diagram(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return normalize_diagram(v)
