"""
Prompt assembly for email generation

The output grammar in SYSTEM_INSTRUCTION is what DraftParser reads back.
Change SUBJECT_LABEL / EMAIL_LABEL here and the parser follows.
"""
from typing import Optional

from config.settings import settings
from models.email import ChatMessage, GenerationRequest

SUBJECT_LABEL = "SUBJECT:"
EMAIL_LABEL = "EMAIL:"

SYSTEM_INSTRUCTION = (
    "You are a professional email writer. Generate well-structured, professional "
    "emails based on the user's prompt. Include a clear subject line and properly "
    "formatted email content. Respond in the following format:\n\n"
    f"{SUBJECT_LABEL} [subject line]\n\n"
    f"{EMAIL_LABEL}\n"
    "[email content]"
)


class PromptBuilder:
    """Build the two-message instruction set sent to the model"""

    def __init__(self, model: Optional[str] = None, temperature: Optional[float] = None,
                 max_output_tokens: Optional[int] = None):
        self.model = model or settings.GEMINI_MODEL
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or settings.LLM_MAX_OUTPUT_TOKENS

    def build(self, user_prompt: str) -> GenerationRequest:
        """
        Build a generation request for one prompt

        Args:
            user_prompt: The caller's prompt, passed through verbatim

        Returns:
            GenerationRequest with [system, user] messages and fixed parameters
        """
        return GenerationRequest(
            messages=(
                ChatMessage(role="system", content=SYSTEM_INSTRUCTION),
                ChatMessage(role="user", content=user_prompt),
            ),
            model=self.model,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
