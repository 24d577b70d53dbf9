"""
Draft extraction from free-form model output

The model is asked to follow the SUBJECT:/EMAIL: grammar but often doesn't.
Parsing never raises; missing parts fall back to defaults and the Draft
records which fields were degraded.
"""
import re
from typing import List, Optional

from layer_1_composition.prompt_builder import EMAIL_LABEL, SUBJECT_LABEL
from models.email import Draft
from utils.logger import get_logger

logger = get_logger(__name__)

FALLBACK_SUBJECT = "Generated Email"
# Only used when the model returned nothing at all
EMPTY_BODY_PLACEHOLDER = "(The model returned an empty response.)"


class DraftParser:
    """Extract subject and body independently from a model response"""

    # Labels are case-sensitive. Subject runs to end of line, body to end of text.
    SUBJECT_PATTERN = re.compile(re.escape(SUBJECT_LABEL) + r'[ \t]*(.*)')
    EMAIL_PATTERN = re.compile(re.escape(EMAIL_LABEL) + r'(.*)', re.DOTALL)

    def __init__(self, fallback_subject: str = FALLBACK_SUBJECT):
        self.fallback_subject = fallback_subject

    def extract_subject(self, raw_content: str) -> Optional[str]:
        """Return the trimmed subject line, or None if absent or blank"""
        match = self.SUBJECT_PATTERN.search(raw_content)
        if not match:
            return None
        subject = match.group(1).strip()
        return subject or None

    def extract_body(self, raw_content: str) -> Optional[str]:
        """Return the trimmed text after EMAIL:, or None if absent or blank"""
        match = self.EMAIL_PATTERN.search(raw_content)
        if not match:
            return None
        body = match.group(1).strip()
        return body or None

    def parse(self, raw_content: Optional[str]) -> Draft:
        """
        Parse a model response into a Draft

        Args:
            raw_content: Unmodified model output (None is treated as empty)

        Returns:
            Draft with non-empty subject and body
        """
        raw_content = raw_content or ""
        degraded: List[str] = []

        subject = self.extract_subject(raw_content)
        if subject is None:
            subject = self.fallback_subject
            degraded.append("subject")

        body = self.extract_body(raw_content)
        if body is None:
            body = raw_content.strip() or EMPTY_BODY_PLACEHOLDER
            degraded.append("body")

        if degraded:
            logger.warning(
                f"Model response did not follow the draft format; "
                f"fell back for: {', '.join(degraded)}"
            )

        return Draft(
            subject=subject,
            body=body,
            raw_content=raw_content,
            degraded_fields=tuple(degraded),
        )


def parse_draft(raw_content: Optional[str]) -> Draft:
    """Parse with the default fallback subject"""
    return DraftParser().parse(raw_content)
