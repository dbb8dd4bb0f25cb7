"""Outbound email delivery over SMTP."""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from cinequiz.core.settings import settings

logger = logging.getLogger(__name__)


class MailDeliveryError(RuntimeError):
    """Raised when the mail provider rejects or cannot take a message."""


class Mailer:
    """Sends verification emails through the configured SMTP relay.

    When no SMTP host is configured the message is logged instead, which keeps
    local development usable without a mail provider.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        *,
        use_tls: bool | None = None,
        sender: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.host = host if host is not None else settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username if username is not None else settings.smtp_user
        self.password = password if password is not None else settings.smtp_password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.sender = sender or settings.mail_from
        self.timeout = timeout or settings.mail_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def build_verification_message(self, to_addr: str, link: str) -> MIMEMultipart:
        """Compose the verification email."""
        ttl_hours = settings.verification_token_ttl_hours
        text_body = (
            f"Welcome to {settings.app_name}!\n\n"
            "Thanks for participating! Open the link below to verify your email address:\n"
            f"{link}\n\n"
            f"This link will expire in {ttl_hours} hours."
        )
        html_body = (
            f"<h1>Welcome to {settings.app_name}!</h1>"
            "<p>Thanks for participating! Please click the link below to verify your email"
            " address:</p>"
            f'<a href="{link}">Verify Email</a>'
            f"<p>This link will expire in {ttl_hours} hours.</p>"
        )

        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"Verify your email for {settings.app_name}"
        msg["From"] = self.sender
        msg["To"] = to_addr
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def send_verification(self, to_addr: str, link: str) -> None:
        """Deliver a verification link to ``to_addr``.

        Raises:
            MailDeliveryError: If the SMTP exchange fails or times out.
        """
        msg = self.build_verification_message(to_addr, link)
        if not self.enabled:
            logger.info("SMTP disabled; verification link for %s: %s", to_addr, link)
            return

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(self.sender, [to_addr], msg.as_string())
        except (smtplib.SMTPException, OSError) as err:
            logger.error("Failed to send verification email to %s: %s", to_addr, err)
            raise MailDeliveryError(str(err)) from err
        logger.info("Verification email sent to %s", to_addr)


def get_mailer() -> Mailer:
    """Return a mailer configured from settings."""
    return Mailer()
