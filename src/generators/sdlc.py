"""SDLC generator: methodology recommendation from a project questionnaire."""

from loguru import logger

from infra.models import ProjectData, SdlcRecommendation
from generators.base import BaseGenerator
from generators.prompts import SDLC_SYSTEM, build_sdlc_prompt


class SdlcGenerator(BaseGenerator):
    """Asks the model which development methodology suits a project."""

    async def generate(self, project: ProjectData) -> SdlcRecommendation:
        """Return the recommended methodology for ``project``.

        Raises:
            LLMClientError: When the client call fails.
            StructuredValueError: When the response cannot be interpreted.
        """
        messages = [
            {"role": "system", "content": SDLC_SYSTEM},
            {"role": "user", "content": build_sdlc_prompt(project)},
        ]
        recommendation = await self._recover(
            messages, SdlcRecommendation, request_context=f"sdlc:{project.name}"
        )

        logger.info(
            f"RECOMMENDED: {recommendation.recommended} for '{project.name}' "
            f"(phases={len(recommendation.phases)}, "
            f"alternatives={len(recommendation.alternatives)})"
        )
        return recommendation
