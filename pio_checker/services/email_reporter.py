"""SMTP email delivery for HTML reports."""

from __future__ import annotations

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog

from pio_checker.core.errors import NotificationDispatchError

logger = structlog.get_logger(__name__)

_PLAIN_FALLBACK = "This report is formatted as HTML. Please view it in an HTML-capable client."


class EmailReporter:
    """Sends HTML reports from a mailbox to itself over STARTTLS."""

    def __init__(
        self,
        sender: str,
        password: str,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        recipients: list[str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.sender = sender
        self.password = password
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.recipients = recipients or [sender]
        self.timeout = timeout

    def build_message(self, subject: str, html_body: str) -> MIMEMultipart:
        """Multipart message with a plain-text fallback and the HTML body."""
        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = ", ".join(self.recipients)
        msg["Subject"] = subject
        msg.attach(MIMEText(_PLAIN_FALLBACK, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def send_report(self, subject: str, html_body: str) -> None:
        msg = self.build_message(subject, html_body)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.sender, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationDispatchError(f"Error sending email: {exc}") from exc

        logger.info("email_sent", subject=subject, recipients=len(self.recipients))
