"""
Generation pipeline: prompt -> model -> parsed draft
"""
from typing import Optional, Protocol

from layer_1_composition.draft_parser import DraftParser
from layer_1_composition.prompt_builder import PromptBuilder
from models.email import Draft, GenerationRequest
from models.errors import ErrorKind, GenerationError
from utils.logger import get_logger

logger = get_logger(__name__)


class CompletionClient(Protocol):
    """Anything that turns a GenerationRequest into free text"""

    async def complete(self, request: GenerationRequest) -> str:
        ...


class GenerationPipeline:
    """
    Turn a free-text prompt into a Draft

    There is no automatic retry. Regenerating is a manual action
    taken by the user after reviewing the failure.
    """

    def __init__(self, llm_client: Optional[CompletionClient],
                 prompt_builder: Optional[PromptBuilder] = None,
                 parser: Optional[DraftParser] = None):
        """
        Args:
            llm_client: Generation client, or None if it failed to initialize
            prompt_builder: Prompt builder (default settings if not provided)
            parser: Draft parser (default fallback subject if not provided)
        """
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or DraftParser()

    @property
    def available(self) -> bool:
        return self.llm_client is not None

    async def generate(self, prompt: str) -> Draft:
        """
        Generate a draft for one prompt

        Args:
            prompt: The user's description of the email to write

        Returns:
            Draft (always, once the model answers, even if the answer is malformed)

        Raises:
            GenerationError: INVALID_INPUT, SERVICE_UNAVAILABLE or UPSTREAM_FAILURE
        """
        if not prompt or not prompt.strip():
            raise GenerationError(ErrorKind.INVALID_INPUT, "Prompt is required")

        if self.llm_client is None:
            raise GenerationError(
                ErrorKind.SERVICE_UNAVAILABLE,
                "Email generation service is not configured",
                details="GEMINI_API_KEY is missing or the client failed to initialize",
            )

        logger.info(f"Generating email for prompt: {prompt}")
        request = self.prompt_builder.build(prompt)

        try:
            raw_content = await self.llm_client.complete(request)
        except Exception as e:
            logger.error(f"Error generating email: {e}", exc_info=True)
            raise GenerationError(
                ErrorKind.UPSTREAM_FAILURE,
                "Failed to generate email",
                details=str(e),
            ) from e

        draft = self.parser.parse(raw_content)
        logger.info("Email generated successfully")
        return draft
