"""
Gemini LLM client used to draft emails.
"""
from __future__ import annotations

from typing import Any, Dict, List

import google.generativeai as genai

from config.settings import settings
from models.email import GenerationRequest
from utils.logger import get_logger

logger = get_logger(__name__)

# Gemini calls the assistant role "model"
ROLE_MAP = {"user": "user", "assistant": "model", "model": "model"}


class LLMClient:
    """Wrapper around Gemini chat-style text generation."""

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key or settings.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is not set; cannot initialize LLM client.")

        genai.configure(api_key=self.api_key)

    def _build_model(self, request: GenerationRequest) -> genai.GenerativeModel:
        """Create a model bound to the request's system instruction and parameters."""
        return genai.GenerativeModel(
            model_name=request.model,
            system_instruction=request.system_instruction or None,
            generation_config=genai.types.GenerationConfig(
                temperature=request.temperature,
                max_output_tokens=request.max_output_tokens,
            ),
        )

    @staticmethod
    def _to_contents(request: GenerationRequest) -> List[Dict[str, Any]]:
        """Map non-system messages to Gemini content entries, preserving order."""
        return [
            {"role": ROLE_MAP.get(message.role, "user"), "parts": [message.content]}
            for message in request.conversation
        ]

    async def complete(self, request: GenerationRequest) -> str:
        """
        Run one chat completion.

        Returns the raw response text, or an empty string if the model produced
        no text (e.g. the candidate was blocked). Transport and API errors
        propagate to the caller.
        """
        model = self._build_model(request)
        logger.debug("Calling %s with %d message(s)", request.model, len(request.messages))
        response = await model.generate_content_async(self._to_contents(request))
        try:
            return response.text or ""
        except ValueError as exc:
            # .text raises when the response has no text parts
            logger.warning("Gemini response had no text: %s", exc)
            return ""
