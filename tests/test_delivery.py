"""
Unit tests for Layer 2: Delivery
Tests recipient validator, email sender and delivery pipeline
"""
import sys
import os
import asyncio
import smtplib
from unittest.mock import MagicMock, patch

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from layer_2_delivery.recipient_validator import (
    RecipientValidator,
    parse_and_validate,
    validate_recipients,
)
from layer_2_delivery.email_sender import EmailSender
from layer_2_delivery.delivery_pipeline import DeliveryPipeline, to_html_body
from models.errors import DeliveryError, ErrorKind, RecipientValidationError


class StubTransport:
    """Transport collaborator that records calls"""

    def __init__(self, message_id="<abc123@example.com>", error=None):
        self.message_id = message_id
        self.error = error
        self.calls = []

    async def send_mail(self, from_email, to, subject, html):
        self.calls.append({"from": from_email, "to": to, "subject": subject, "html": html})
        if self.error:
            raise self.error
        return self.message_id


class TestRecipientValidator:
    """Test recipient validator"""

    def test_valid_list(self):
        assert parse_and_validate("a@b.com, c@d.org") == ("a@b.com", "c@d.org")

    def test_single_address(self):
        assert parse_and_validate("  someone@example.co.uk ") == ("someone@example.co.uk",)

    def test_case_preserved(self):
        assert parse_and_validate("Ann.Lee@Example.com") == ("Ann.Lee@Example.com",)

    def test_invalid_segment_reported(self):
        with pytest.raises(RecipientValidationError) as exc_info:
            parse_and_validate("a@b.com, not-an-email")

        assert exc_info.value.invalid == ["not-an-email"]
        assert exc_info.value.empty is False

    def test_every_invalid_segment_reported(self):
        """All problems come back in one round-trip, in input order"""
        with pytest.raises(RecipientValidationError) as exc_info:
            parse_and_validate("bad1, a@b.com, x@y, two words@b.com, @b.com")

        assert exc_info.value.invalid == ["bad1", "x@y", "two words@b.com", "@b.com"]

    def test_empty_inputs(self):
        """Blank and comma-only inputs are a distinct error"""
        for raw in ("", "   ", ",", " , ,, ", None):
            with pytest.raises(RecipientValidationError) as exc_info:
                parse_and_validate(raw)
            assert exc_info.value.empty is True
            assert exc_info.value.invalid == []

    def test_empty_segments_ignored(self):
        assert parse_and_validate("a@b.com,, c@d.org,") == ("a@b.com", "c@d.org")

    def test_syntax_predicate(self):
        valid = ["a@b.co", "first.last+tag@sub.domain.org", "x@y.z"]
        invalid = ["", "plain", "a@b", "a@@b.com", "a b@c.com", "a@b .com", "a@b.", "@b.com"]

        for candidate in valid:
            assert RecipientValidator.is_valid_email(candidate), candidate
        for candidate in invalid:
            assert not RecipientValidator.is_valid_email(candidate), candidate

    def test_idempotent(self):
        """Same input, same output"""
        raw = "a@b.com, c@d.org"
        assert parse_and_validate(raw) == parse_and_validate(raw)

        for _ in range(2):
            with pytest.raises(RecipientValidationError) as exc_info:
                parse_and_validate("a@b.com, nope")
            assert exc_info.value.invalid == ["nope"]

    def test_check_summary(self):
        """Non-raising summary for review screens"""
        result = validate_recipients("a@b.com, nope")

        assert result.valid is False
        assert result.valid_emails == ("a@b.com",)
        assert result.invalid_emails == ("nope",)

        assert validate_recipients(" , ").empty is True
        assert validate_recipients("a@b.com").valid is True


class TestEmailSender:
    """Test email sender"""

    @patch('layer_2_delivery.email_sender.settings')
    def test_initialization_from_settings(self, mock_settings):
        """Unset arguments fall back to the shared settings"""
        mock_settings.SMTP_SERVER = "smtp.example.com"
        mock_settings.SMTP_PORT = 2525
        mock_settings.SMTP_USERNAME = "user@example.com"
        mock_settings.SMTP_PASSWORD = "password"
        mock_settings.SMTP_USE_TLS = False

        sender = EmailSender()

        assert sender.smtp_server == "smtp.example.com"
        assert sender.smtp_port == 2525
        assert sender.use_tls is False
        assert sender.is_configured()

    @patch('layer_2_delivery.email_sender.settings')
    def test_arguments_override_settings(self, mock_settings):
        mock_settings.SMTP_SERVER = "smtp.example.com"
        mock_settings.SMTP_PORT = 2525
        mock_settings.SMTP_USERNAME = "user@example.com"
        mock_settings.SMTP_PASSWORD = "password"
        mock_settings.SMTP_USE_TLS = False

        sender = EmailSender(smtp_server="smtp.other.org", smtp_username="", use_tls=True)

        assert sender.smtp_server == "smtp.other.org"
        assert sender.smtp_username == ""
        assert sender.use_tls is True
        assert not sender.is_configured()

    def test_not_configured_without_credentials(self):
        sender = EmailSender(smtp_username="", smtp_password="")
        assert not sender.is_configured()

    def test_build_message(self):
        sender = EmailSender(smtp_username="u", smtp_password="p")
        msg = sender.build_message("me@example.com", ["a@b.com", "c@d.org"], "Hello", "Hi<br>there")

        assert msg['From'] == "me@example.com"
        assert msg['To'] == "a@b.com, c@d.org"
        assert msg['Subject'] == "Hello"
        assert msg['Message-ID'].endswith("@example.com>")
        part = msg.get_payload()[0]
        assert part.get_content_type() == "text/html"

    @patch('layer_2_delivery.email_sender.smtplib.SMTP')
    def test_send_mail_success(self, mock_smtp):
        """Successful send returns the Message-ID"""
        mock_server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = mock_server
        sender = EmailSender(smtp_server="smtp.gmail.com", smtp_port=587,
                             smtp_username="me@gmail.com", smtp_password="pw", use_tls=True)

        message_id = asyncio.run(sender.send_mail("me@gmail.com", ["a@b.com"], "Subj", "Body"))

        mock_smtp.assert_called_once_with("smtp.gmail.com", 587)
        assert mock_server.starttls.called
        mock_server.login.assert_called_once_with("me@gmail.com", "pw")
        sent_msg = mock_server.send_message.call_args.args[0]
        assert sent_msg['Message-ID'] == message_id
        assert mock_server.send_message.call_args.kwargs["to_addrs"] == ["a@b.com"]

    @patch('layer_2_delivery.email_sender.smtplib.SMTP')
    def test_send_mail_without_tls(self, mock_smtp):
        mock_server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = mock_server
        sender = EmailSender(smtp_username="u", smtp_password="p", use_tls=False)

        sender.send_mail_sync("u@example.com", ["a@b.com"], "Subj", "Body")

        assert not mock_server.starttls.called

    @patch('layer_2_delivery.email_sender.smtplib.SMTP')
    def test_send_mail_authentication_error(self, mock_smtp):
        """Authentication errors propagate to the caller"""
        mock_server = MagicMock()
        mock_server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
        mock_smtp.return_value.__enter__.return_value = mock_server
        sender = EmailSender(smtp_server="smtp.gmail.com", smtp_username="u", smtp_password="wrong")

        with pytest.raises(smtplib.SMTPAuthenticationError):
            sender.send_mail_sync("u@gmail.com", ["a@b.com"], "Subj", "Body")
        assert not mock_server.send_message.called


class TestDeliveryPipeline:
    """Test delivery pipeline"""

    def test_send_success(self):
        """Newlines become <br> and recipients are echoed back"""
        transport = StubTransport()
        pipeline = DeliveryPipeline(transport, from_email="sender@example.com")

        receipt = asyncio.run(pipeline.send("a@b.com", "Subj", "Line1\nLine2"))

        assert len(transport.calls) == 1
        call = transport.calls[0]
        assert call["to"] == ["a@b.com"]
        assert call["from"] == "sender@example.com"
        assert call["subject"] == "Subj"
        assert "<br>" in call["html"]
        assert "\n" not in call["html"]
        assert receipt.message_id == "<abc123@example.com>"
        assert receipt.recipients == ("a@b.com",)

    def test_multiple_recipients_in_order(self):
        transport = StubTransport()
        receipt = asyncio.run(DeliveryPipeline(transport, from_email="s@x.com").send(
            " c@d.org , a@b.com ", "Subj", "Body"))

        assert transport.calls[0]["to"] == ["c@d.org", "a@b.com"]
        assert receipt.recipients == ("c@d.org", "a@b.com")

    def test_fields_trimmed(self):
        transport = StubTransport()
        asyncio.run(DeliveryPipeline(transport, from_email="s@x.com").send(
            "a@b.com", "  Subj  ", "\n Body \n"))

        assert transport.calls[0]["subject"] == "Subj"
        assert transport.calls[0]["html"] == "Body"

    def test_missing_fields_rejected_without_call(self):
        transport = StubTransport()
        pipeline = DeliveryPipeline(transport, from_email="s@x.com")

        for args in (("", "Subj", "Body"), ("a@b.com", "  ", "Body"), ("a@b.com", "Subj", None)):
            with pytest.raises(DeliveryError) as exc_info:
                asyncio.run(pipeline.send(*args))
            assert exc_info.value.kind == ErrorKind.MISSING_FIELD

        assert transport.calls == []

    def test_missing_field_named(self):
        with pytest.raises(DeliveryError) as exc_info:
            asyncio.run(DeliveryPipeline(StubTransport()).send("a@b.com", "", ""))
        assert exc_info.value.details == "Missing: subject, body"

    def test_invalid_recipients_rejected_without_call(self):
        transport = StubTransport()

        with pytest.raises(DeliveryError) as exc_info:
            asyncio.run(DeliveryPipeline(transport).send("a@b.com, nope, x@y", "Subj", "Body"))

        assert exc_info.value.kind == ErrorKind.INVALID_RECIPIENTS
        assert exc_info.value.invalid_recipients == ["nope", "x@y"]
        assert exc_info.value.to_dict()["invalidRecipients"] == ["nope", "x@y"]
        assert transport.calls == []

    def test_comma_only_recipients_rejected_without_call(self):
        transport = StubTransport()

        with pytest.raises(DeliveryError) as exc_info:
            asyncio.run(DeliveryPipeline(transport).send(" , , ", "Subj", "Body"))

        assert exc_info.value.kind == ErrorKind.INVALID_RECIPIENTS
        assert exc_info.value.invalid_recipients == []
        assert transport.calls == []

    def test_transport_failure(self):
        transport = StubTransport(error=smtplib.SMTPServerDisconnected("Connection unexpectedly closed"))

        with pytest.raises(DeliveryError) as exc_info:
            asyncio.run(DeliveryPipeline(transport).send("a@b.com", "Subj", "Body"))

        error = exc_info.value
        assert error.kind == ErrorKind.TRANSPORT_FAILURE
        assert error.message == "Failed to send email"
        assert "Connection unexpectedly closed" in error.details
        # Not retried
        assert len(transport.calls) == 1

    def test_service_unavailable(self):
        pipeline = DeliveryPipeline(None, from_email="s@x.com")

        assert pipeline.available is False
        with pytest.raises(DeliveryError) as exc_info:
            asyncio.run(pipeline.send("a@b.com", "Subj", "Body"))
        assert exc_info.value.kind == ErrorKind.SERVICE_UNAVAILABLE

    def test_validation_runs_before_availability_check(self):
        with pytest.raises(DeliveryError) as exc_info:
            asyncio.run(DeliveryPipeline(None).send("nope", "Subj", "Body"))
        assert exc_info.value.kind == ErrorKind.INVALID_RECIPIENTS

    def test_to_html_body(self):
        assert to_html_body("a\nb\r\nc\rd") == "a<br>b<br>c<br>d"
        assert to_html_body("no breaks") == "no breaks"

    def test_multiline_subject_rejected_without_call(self):
        """Line breaks in the subject would split the mail header"""
        transport = StubTransport()
        pipeline = DeliveryPipeline(transport, from_email="s@x.com")

        for subject in ("Hi\nBcc: evil@x.com", "Hi\r\nBcc: evil@x.com", "Hi\rthere"):
            with pytest.raises(DeliveryError) as exc_info:
                asyncio.run(pipeline.send("a@b.com", subject, "Body"))
            assert exc_info.value.kind == ErrorKind.INVALID_INPUT
            assert exc_info.value.message == "Subject must be a single line"

        assert transport.calls == []

    def test_surrounding_newlines_in_subject_trimmed(self):
        transport = StubTransport()
        asyncio.run(DeliveryPipeline(transport, from_email="s@x.com").send(
            "a@b.com", "\nSubj\r\n", "Body"))

        assert transport.calls[0]["subject"] == "Subj"
