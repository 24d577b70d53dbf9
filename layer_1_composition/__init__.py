"""
Layer 1: Composition
- Prompt Builder (system instruction + user prompt)
- Draft Parser (SUBJECT:/EMAIL: extraction with fallbacks)
- Generation Pipeline (orchestrates prompt -> model -> draft)
"""
from .prompt_builder import PromptBuilder, SYSTEM_INSTRUCTION
from .draft_parser import DraftParser, FALLBACK_SUBJECT, parse_draft
from .generation_pipeline import GenerationPipeline

__all__ = [
    'PromptBuilder',
    'SYSTEM_INSTRUCTION',
    'DraftParser',
    'FALLBACK_SUBJECT',
    'parse_draft',
    'GenerationPipeline',
]
