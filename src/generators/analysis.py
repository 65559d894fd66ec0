"""Code analysis generator — quality assessment from structural metrics."""

from loguru import logger

from infra.models import CodeAnalysis, ProjectStructure
from generators.base import BaseGenerator
from generators.prompts import ANALYSIS_SYSTEM, build_analysis_prompt


class CodeAnalysisGenerator(BaseGenerator):
    """Asks the model for a quality assessment of a parsed repository."""

    async def generate(self, structure: ProjectStructure) -> CodeAnalysis:
        """Return the model's assessment of ``structure``.

        Raises:
            LLMClientError: When the client call fails.
            StructuredValueError: When the response cannot be interpreted.
        """
        messages = [
            {"role": "system", "content": ANALYSIS_SYSTEM},
            {"role": "user", "content": build_analysis_prompt(structure)},
        ]
        analysis = await self._recover(messages, CodeAnalysis, request_context="analysis")

        logger.info(
            f"ANALYZED: quality={analysis.quality_score:.0f}, "
            f"maintainability={analysis.maintainability_index:.0f}, "
            f"recommendations={len(analysis.recommendations)}"
        )
        return analysis
