"""
Email Client - outbound SMTP channel for HTML reports.

An unconfigured channel (no SMTP host) is tolerated: sends are logged as
"not sent" and return False.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional

from consultant_tracker.core.config import get_settings
from consultant_tracker.core.logging_config import report_logger as logger


class EmailDeliveryError(Exception):
    """Raised when the SMTP server rejects or fails a send."""


class EmailClient:
    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.host)

    def send_html(self, sender: str, recipients: List[str], subject: str, html: str) -> bool:
        """
        Send an HTML email. Returns False when the channel is not configured,
        raises EmailDeliveryError when delivery fails.
        """
        if not self.is_configured:
            logger.warning(f"[Email] SMTP not configured - '{subject}' generated but not sent")
            return False

        message = MIMEMultipart("alternative")
        message["From"] = sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.attach(MIMEText(html, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(message, from_addr=sender, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"[Email] Failed to send '{subject}': {e}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"[Email] '{subject}' sent to {', '.join(recipients)}")
        return True


def get_email_client() -> EmailClient:
    settings = get_settings()
    return EmailClient(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user or None,
        password=settings.smtp_password or None,
        use_tls=settings.smtp_use_tls,
    )


def test_smtp_connection() -> bool:
    """Check the SMTP server accepts a connection (and login, when credentials are set)."""
    client = get_email_client()
    if not client.is_configured:
        return False
    try:
        with smtplib.SMTP(client.host, client.port, timeout=client.timeout) as server:
            if client.use_tls:
                server.starttls()
            if client.username:
                server.login(client.username, client.password or "")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"[Email] SMTP connection check failed: {e}")
        return False
