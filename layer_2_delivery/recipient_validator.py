"""
Recipient list parsing and validation

This is a syntactic check only: it confirms an address is shaped like
local@domain.tld with no whitespace. It does not check that the mailbox
exists or that the domain accepts mail.
"""
import re
from dataclasses import dataclass
from typing import List, Tuple

from models.errors import RecipientValidationError


@dataclass(frozen=True)
class RecipientCheck:
    """Non-raising summary of a recipient string, for review screens"""
    valid: bool
    valid_emails: Tuple[str, ...]
    invalid_emails: Tuple[str, ...]
    empty: bool = False


class RecipientValidator:
    """Split a comma-delimited recipient string and check every address"""

    EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')
    DELIMITER = ','

    @classmethod
    def is_valid_email(cls, candidate: str) -> bool:
        """
        Check a single address against the syntax predicate

        Args:
            candidate: Address to check (surrounding whitespace is ignored)

        Returns:
            True if the address is local@domain.tld shaped
        """
        if not candidate:
            return False
        return cls.EMAIL_PATTERN.fullmatch(candidate.strip()) is not None

    @classmethod
    def split(cls, raw: str) -> List[str]:
        """Split on commas, trim, and drop empty segments"""
        if not raw:
            return []
        segments = [segment.strip() for segment in raw.split(cls.DELIMITER)]
        return [segment for segment in segments if segment]

    @classmethod
    def parse_and_validate(cls, raw: str) -> Tuple[str, ...]:
        """
        Parse a recipient string into a validated address list

        Every invalid segment is reported at once so callers can fix them
        all in one round-trip.

        Args:
            raw: Comma-delimited addresses, e.g. "a@b.com, c@d.org"

        Returns:
            Tuple of trimmed addresses in input order

        Raises:
            RecipientValidationError: If the input is blank or any address is invalid
        """
        segments = cls.split(raw)
        if not segments:
            raise RecipientValidationError(empty=True)

        invalid = [segment for segment in segments if not cls.is_valid_email(segment)]
        if invalid:
            raise RecipientValidationError(invalid=invalid)

        return tuple(segments)

    @classmethod
    def check(cls, raw: str) -> RecipientCheck:
        """Summarise a recipient string without raising"""
        segments = cls.split(raw)
        if not segments:
            return RecipientCheck(valid=False, valid_emails=(), invalid_emails=(), empty=True)

        valid_emails = tuple(s for s in segments if cls.is_valid_email(s))
        invalid_emails = tuple(s for s in segments if not cls.is_valid_email(s))
        return RecipientCheck(
            valid=not invalid_emails,
            valid_emails=valid_emails,
            invalid_emails=invalid_emails,
        )


def parse_and_validate(raw: str) -> Tuple[str, ...]:
    """Module-level shortcut for RecipientValidator.parse_and_validate"""
    return RecipientValidator.parse_and_validate(raw)


def validate_recipients(raw: str) -> RecipientCheck:
    """Module-level shortcut for RecipientValidator.check"""
    return RecipientValidator.check(raw)
