"""Shared fixtures and configuration for recovery and generator tests."""

import os
import sys
from typing import Dict, List, Optional, Sequence

import pytest

# Ensure the repo root (for tests.fixtures) and src/ packages are importable
_ROOT = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, _ROOT)
sys.path.insert(0, os.path.join(_ROOT, "src"))

from infra.llm_client import BaseLLMClient, LLMClientError  # noqa: E402
from infra.models import ProjectStructure, SourceFile  # noqa: E402


class ScriptedLLMClient(BaseLLMClient):
    """Fake client that replays canned responses in order.

    An ``Exception`` instance in the script is raised instead of returned.
    Every call's messages are recorded in ``calls``.
    """

    model = "scripted"

    def __init__(self, responses: Sequence[object]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, object]] = []

    async def complete_text(
        self,
        messages: List[Dict[str, str]],
        request_context: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        self.calls.append(
            {"messages": messages, "request_context": request_context, "temperature": temperature}
        )
        if not self._responses:
            raise LLMClientError("script exhausted")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


# --- Fixtures ---


@pytest.fixture
def scripted_client():
    """Factory: ``scripted_client(response, ...)`` returns a ScriptedLLMClient."""

    def _make(*responses: object) -> ScriptedLLMClient:
        return ScriptedLLMClient(responses)

    return _make


@pytest.fixture
def project_structure() -> ProjectStructure:
    """Small Express-style repository as handed over by the structural analyzer."""
    return ProjectStructure.model_validate(
        {
            "totalFiles": 4,
            "totalLines": 210,
            "languages": {"JavaScript": 3, "JSON": 1},
            "complexity": {"average": 3.2, "max": 9, "min": 1},
            "testCoverage": 42,
            "issues": [{"type": "complexity", "file": "src/routes/users.js"}],
            "patterns": {"architecture": "MVC", "framework": ["Express"], "patterns": []},
            "files": [
                SourceFile(
                    path="src/server.js",
                    content=(
                        "const express = require('express');\n"
                        "const users = require('./routes/users');\n"
                        "const app = express();\n"
                        "app.use('/api/users', users);\n"
                        "app.listen(3000);\n"
                    ),
                ),
                SourceFile(
                    path="src/routes/users.js",
                    content=(
                        "const router = require('express').Router();\n"
                        "router.get('/', (req, res) => res.json([]));\n"
                        "module.exports = router;\n"
                    ),
                ),
                SourceFile(path="assets/images/logo.svg", content="<svg>...</svg> with some bytes"),
                SourceFile(path="src/empty.js", content="  \n"),
            ],
        }
    )
