"""
Layer 2: Delivery
- Recipient Validator (comma-delimited address parsing)
- Email Sender (SMTP/Gmail)
- Delivery Pipeline (orchestrates validation -> dispatch)
"""
from .recipient_validator import RecipientValidator, parse_and_validate, validate_recipients
from .email_sender import EmailSender
from .delivery_pipeline import DeliveryPipeline, to_html_body

__all__ = [
    'RecipientValidator',
    'parse_and_validate',
    'validate_recipients',
    'EmailSender',
    'DeliveryPipeline',
    'to_html_body',
]
