"""Tests for the response and input schemas."""

import pytest
from pydantic import ValidationError

from infra.models import CodeAnalysis, Documentation, ProjectStructure, TestCase, TestSuite


def test_project_structure_accepts_camel_and_snake_case() -> None:
    camel = ProjectStructure.model_validate({"totalFiles": 3, "totalLines": 90, "testCoverage": 12.5})
    snake = ProjectStructure(total_files=3, total_lines=90, test_coverage=12.5)
    assert camel == snake
    assert camel.patterns.architecture == "Unknown"


def test_code_analysis_requires_scores() -> None:
    with pytest.raises(ValidationError):
        CodeAnalysis.model_validate({"strengths": []})


def test_code_analysis_by_field_name() -> None:
    analysis = CodeAnalysis(quality_score=55.5, maintainability_index=60)
    assert analysis.model_dump(by_alias=True)["qualityScore"] == 55.5


def test_test_case_defaults_and_normalization() -> None:
    case = TestCase.model_validate({"name": "adds", "type": " E2E ", "priority": "Low"})
    assert case.type == "e2e"
    assert case.priority == "low"
    assert TestCase(name="x").type == "unit"


def test_test_suite_ignores_unknown_fields() -> None:
    suite = TestSuite.model_validate({"testCases": [{"name": "a"}], "coverage": 250, "notes": "?"})
    assert suite.coverage == 100
    assert len(suite.test_cases) == 1


def test_documentation_normalizes_diagram() -> None:
    docs = Documentation.model_validate(
        {"summary": "s", "mermaidDiagram": "```mermaid\nweb app --> api\n```"}
    )
    assert docs.mermaid_diagram == "flowchart TD\nweb_app --> api"


def test_documentation_without_diagram() -> None:
    docs = Documentation.model_validate({"summary": "s", "apis": [{"endpoint": "/health"}]})
    assert docs.mermaid_diagram is None
    assert docs.apis[0].method == "GET"


def test_documentation_requires_summary() -> None:
    with pytest.raises(ValidationError):
        Documentation.model_validate({"components": []})
