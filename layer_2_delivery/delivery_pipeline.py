"""
Delivery pipeline: validate a reviewed draft and hand it to the transport
"""
import re
from typing import List, Optional, Protocol, Sequence

from config.settings import settings
from layer_2_delivery.recipient_validator import RecipientValidator
from models.email import DeliveryReceipt, SendRequest
from models.errors import DeliveryError, ErrorKind, RecipientValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

LINE_BREAK_PATTERN = re.compile(r'\r\n|\r|\n')
HTML_LINE_BREAK = '<br>'


class MailTransport(Protocol):
    """Anything that can dispatch a fully formed message"""

    async def send_mail(self, from_email: str, to: Sequence[str], subject: str,
                        html: str) -> str:
        ...


def to_html_body(body: str) -> str:
    """Turn plain-text line breaks into <br> so HTML mail clients keep them"""
    return LINE_BREAK_PATTERN.sub(HTML_LINE_BREAK, body)


class DeliveryPipeline:
    """
    Validate -> dispatch

    Recipients are always re-validated here, even if the caller checked
    them at review time, because the field may have been edited since.
    Failed sends are never retried: a duplicate email is worse than a
    surfaced error.
    """

    def __init__(self, transport: Optional[MailTransport], from_email: Optional[str] = None):
        """
        Args:
            transport: Mail transport, or None if it failed to initialize
            from_email: Fixed sender address (defaults to settings.FROM_EMAIL)
        """
        self.transport = transport
        self.from_email = from_email if from_email is not None else settings.FROM_EMAIL

    @property
    def available(self) -> bool:
        return self.transport is not None

    def prepare(self, recipients_raw: str, subject: str, body: str) -> SendRequest:
        """
        Validate the caller's fields into a SendRequest

        Raises:
            DeliveryError: MISSING_FIELD, INVALID_INPUT or INVALID_RECIPIENTS
        """
        recipients_raw = (recipients_raw or "").strip()
        subject = (subject or "").strip()
        body = (body or "").strip()

        missing: List[str] = [
            name for name, value in
            (("recipients", recipients_raw), ("subject", subject), ("body", body))
            if not value
        ]
        if missing:
            raise DeliveryError(
                ErrorKind.MISSING_FIELD,
                "Recipients, subject, and email body are required",
                details=f"Missing: {', '.join(missing)}",
            )

        # Subject goes into a mail header, which must stay on one line
        if LINE_BREAK_PATTERN.search(subject):
            raise DeliveryError(
                ErrorKind.INVALID_INPUT,
                "Subject must be a single line",
                details="Subject contains a line break",
            )

        try:
            recipients = RecipientValidator.parse_and_validate(recipients_raw)
        except RecipientValidationError as e:
            raise DeliveryError(
                ErrorKind.INVALID_RECIPIENTS,
                "At least one recipient email is required" if e.empty else "Invalid email addresses",
                details=str(e),
                invalid_recipients=e.invalid,
            ) from e

        return SendRequest(recipients=recipients, subject=subject, body=body)

    async def send(self, recipients_raw: str, subject: str, body: str) -> DeliveryReceipt:
        """
        Validate and dispatch one email

        Args:
            recipients_raw: Comma-delimited recipient addresses
            subject: Subject line
            body: Plain-text body (newlines become <br>)

        Returns:
            DeliveryReceipt with the transport's message id and the exact recipients

        Raises:
            DeliveryError: Classified by ErrorKind
        """
        request = self.prepare(recipients_raw, subject, body)

        if self.transport is None:
            raise DeliveryError(
                ErrorKind.SERVICE_UNAVAILABLE,
                "Email service is not configured",
                details="SMTP credentials are missing or the transport failed to initialize",
            )

        logger.info(f"Sending email to: {', '.join(request.recipients)}")

        try:
            message_id = await self.transport.send_mail(
                from_email=self.from_email,
                to=list(request.recipients),
                subject=request.subject,
                html=to_html_body(request.body),
            )
        except Exception as e:
            logger.error(f"Error sending email: {e}", exc_info=True)
            raise DeliveryError(
                ErrorKind.TRANSPORT_FAILURE,
                "Failed to send email",
                details=str(e),
            ) from e

        receipt = DeliveryReceipt(
            message_id=message_id,
            recipients=request.recipients,
            from_email=self.from_email,
            subject=request.subject,
        )
        self.log_send_status(receipt)
        return receipt

    def log_send_status(self, receipt: DeliveryReceipt):
        """Log a successful send for traceability"""
        logger.info(f"Email sent successfully: {receipt.message_id}")
        logger.info(f"  To: {', '.join(receipt.recipients)}")
        logger.info(f"  Subject: {receipt.subject}")
        logger.info(f"  Timestamp: {receipt.sent_at.isoformat()}")
