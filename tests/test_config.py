"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from utils.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RECOVERY_EXCERPT_CHARS", "MAX_PROMPT_FILES", "LOG_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.recovery_excerpt_chars == 500
    assert s.max_prompt_files == 6
    assert s.log_dir == "logs"
    assert s.generation_temperature == pytest.approx(0.1)


def test_env_overrides_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("recovery_excerpt_chars", "120")
    monkeypatch.setenv("MAX_FILE_CHARS", "900")
    s = Settings(_env_file=None)
    assert s.recovery_excerpt_chars == 120
    assert s.max_file_chars == 900


def test_empty_log_dir_disables_file_sink(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_DIR", "")
    assert Settings(_env_file=None).log_dir is None


def test_non_positive_budget_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_PROMPT_FILES", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
