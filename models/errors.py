"""
Error taxonomy for the composition and delivery pipelines
"""
from enum import Enum
from typing import List, Optional, Sequence


class ErrorKind(str, Enum):
    """What went wrong, independent of which pipeline hit it"""
    INVALID_INPUT = "invalid_input"
    MISSING_FIELD = "missing_field"
    INVALID_RECIPIENTS = "invalid_recipients"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UPSTREAM_FAILURE = "upstream_failure"
    TRANSPORT_FAILURE = "transport_failure"


class RecipientValidationError(ValueError):
    """
    Raised when a recipient string does not yield a usable address list

    Args:
        invalid: Every segment that failed the syntax check, in input order
        empty: True when the input had no segments at all
    """

    def __init__(self, invalid: Sequence[str] = (), empty: bool = False):
        self.invalid: List[str] = list(invalid)
        self.empty = empty
        if empty:
            message = "At least one recipient email is required"
        else:
            message = f"Invalid email addresses: {', '.join(self.invalid)}"
        super().__init__(message)


class PipelineError(Exception):
    """Base class for classified pipeline failures"""

    def __init__(self, kind: ErrorKind, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class GenerationError(PipelineError):
    """Raised when a draft could not be generated"""


class DeliveryError(PipelineError):
    """Raised when an email could not be sent"""

    def __init__(self, kind: ErrorKind, message: str, details: Optional[str] = None,
                 invalid_recipients: Sequence[str] = ()):
        super().__init__(kind, message, details)
        self.invalid_recipients: List[str] = list(invalid_recipients)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.invalid_recipients:
            payload["invalidRecipients"] = self.invalid_recipients
        return payload
