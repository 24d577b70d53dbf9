"""
Email sending via SMTP
Supports Gmail and other SMTP servers
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from typing import Optional, Sequence

from config.settings import settings
from utils.logger import get_logger

logger = get_logger(__name__)


class EmailSender:
    """Send HTML emails via SMTP"""

    def __init__(self, smtp_server: Optional[str] = None, smtp_port: Optional[int] = None,
                 smtp_username: Optional[str] = None, smtp_password: Optional[str] = None,
                 use_tls: Optional[bool] = None):
        """Initialize email sender from arguments, falling back to settings (Gmail-ready)"""
        self.smtp_server = smtp_server or settings.SMTP_SERVER
        self.smtp_port = smtp_port or settings.SMTP_PORT  # 587 for TLS, 465 for SSL
        self.smtp_username = smtp_username if smtp_username is not None else settings.SMTP_USERNAME
        self.smtp_password = smtp_password if smtp_password is not None else settings.SMTP_PASSWORD
        self.use_tls = use_tls if use_tls is not None else settings.SMTP_USE_TLS

        if self.smtp_server == "smtp.gmail.com" and self.smtp_username and not self.smtp_password:
            logger.warning("Gmail requires an App Password (not your regular password).")

    def is_configured(self) -> bool:
        """Check if the SMTP server and credentials are set"""
        return bool(self.smtp_server and self.smtp_username and self.smtp_password)

    def build_message(self, from_email: str, to: Sequence[str], subject: str,
                      html: str) -> MIMEMultipart:
        """
        Build the MIME message

        Args:
            from_email: Sender address
            to: Recipient addresses
            subject: Subject line
            html: HTML body

        Returns:
            Message with From/To/Subject/Date/Message-ID headers set
        """
        domain = from_email.rsplit("@", 1)[-1] if "@" in from_email else None
        msg = MIMEMultipart("alternative")
        msg['From'] = from_email
        msg['To'] = ", ".join(to)
        msg['Subject'] = subject
        msg['Date'] = formatdate(localtime=True)
        msg['Message-ID'] = make_msgid(domain=domain)
        msg.attach(MIMEText(html, 'html', 'utf-8'))
        return msg

    def send_mail_sync(self, from_email: str, to: Sequence[str], subject: str,
                       html: str) -> str:
        """
        Send an email over a fresh SMTP connection

        Returns:
            The Message-ID assigned to the sent message

        Raises:
            smtplib.SMTPException: On any SMTP-level failure
            OSError: If the server cannot be reached
        """
        msg = self.build_message(from_email, to, subject, html)

        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg, from_addr=from_email, to_addrs=list(to))
        except smtplib.SMTPAuthenticationError:
            logger.error("SMTP authentication failed for %s", self.smtp_username)
            if self.smtp_server == "smtp.gmail.com":
                logger.error("Gmail authentication failed. Common issues:")
                logger.error("  1. Make sure you're using an App Password (not your regular Gmail password)")
                logger.error("  2. Enable 2-Step Verification in your Google Account")
                logger.error("  3. Generate an App Password: https://myaccount.google.com/apppasswords")
            raise

        return msg['Message-ID']

    async def send_mail(self, from_email: str, to: Sequence[str], subject: str,
                        html: str) -> str:
        """Send without blocking the event loop; see send_mail_sync"""
        return await asyncio.to_thread(self.send_mail_sync, from_email, to, subject, html)
