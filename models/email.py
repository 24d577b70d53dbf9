"""
Email data models

Drafts come out of the composition layer, receipts out of the delivery layer.
None of these objects are persisted.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple


@dataclass(frozen=True)
class ChatMessage:
    """One instruction message sent to the generation service"""
    role: str  # "system", "user" or "assistant"
    content: str


@dataclass(frozen=True)
class GenerationRequest:
    """Ordered messages plus the fixed generation parameters"""
    messages: Tuple[ChatMessage, ...]
    model: str
    temperature: float
    max_output_tokens: int

    @property
    def system_instruction(self) -> str:
        """All system messages joined, in order"""
        return "\n\n".join(m.content for m in self.messages if m.role == "system")

    @property
    def conversation(self) -> List[ChatMessage]:
        """Non-system messages, in order"""
        return [m for m in self.messages if m.role != "system"]


@dataclass(frozen=True)
class Draft:
    """Structured subject/body pair parsed from a model response"""
    subject: str
    body: str
    raw_content: str  # Unmodified model output, kept so failed parses stay inspectable
    degraded_fields: Tuple[str, ...] = ()

    @property
    def parse_degraded(self) -> bool:
        """True when the parser had to fall back for at least one field"""
        return bool(self.degraded_fields)


@dataclass(frozen=True)
class SendRequest:
    """A validated email ready for the transport"""
    recipients: Tuple[str, ...]
    subject: str
    body: str


@dataclass(frozen=True)
class DeliveryReceipt:
    """Confirmation of one successful dispatch"""
    message_id: str
    recipients: Tuple[str, ...]
    from_email: str = ""
    subject: str = ""
    sent_at: datetime = field(default_factory=datetime.now)
