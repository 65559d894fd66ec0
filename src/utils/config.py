"""
Centralised configuration for Repo Insight.

All environment variables are declared once in ``Settings`` (pydantic-settings).
The module-level ``settings`` singleton is the single source of truth; other
modules import from here instead of calling ``os.getenv`` directly.

Usage:

    from utils.config import settings

    print(settings.recovery_excerpt_chars)   # typed int, default 500
    print(settings.max_prompt_files)         # typed int, default 6
"""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from infra.logging_config import configure_logging

# Resolve .env relative to this file so it's always found regardless of cwd
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file.

    pydantic-settings maps ``UPPER_CASE`` env vars to ``lower_case`` fields
    automatically, so ``MAX_PROMPT_FILES`` → ``settings.max_prompt_files``.
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",          # silently ignore unknown env vars
        case_sensitive=False,
    )

    # --- Recovery ------------------------------------------------------------
    #: Characters of offending text kept in a RecoveryFailure excerpt
    recovery_excerpt_chars: int = 500

    # --- Prompt budget -------------------------------------------------------
    max_input_tokens: int = 8000
    chunk_tokens: int = 2000
    #: Files included verbatim in documentation / test prompts
    max_prompt_files: int = 6
    #: Per-file character cap before the content is truncated
    max_file_chars: int = 2000

    # --- Generation ----------------------------------------------------------
    generation_temperature: float = 0.1

    # --- Logging -------------------------------------------------------------
    #: Directory for log files; empty disables the file sink
    log_dir: Optional[str] = "logs"
    log_level: str = "INFO"

    @field_validator("recovery_excerpt_chars", "max_input_tokens", "chunk_tokens",
                     "max_prompt_files", "max_file_chars")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("log_dir", mode="before")
    @classmethod
    def _empty_log_dir(cls, v: Optional[str]) -> Optional[str]:
        """Treat LOG_DIR="" as 'no file sink'."""
        return v or None


#: Singleton — import this in all consumer modules.
settings = Settings()


def setup_logging(log_file_prefix: str = "repo_insight") -> Optional[str]:
    """Configure logging from settings."""
    return configure_logging(
        log_file_prefix=log_file_prefix,
        logs_dir=settings.log_dir,
        console_level=settings.log_level,
        third_party_levels={
            "asyncio": "WARNING",
        },
    )
