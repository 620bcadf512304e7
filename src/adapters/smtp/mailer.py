"""
SMTP notifier adapter - Implements Notifier protocol.

Sends the verification link as a multipart (text + HTML) message over
SMTP with STARTTLS. Each call opens its own bounded connection; failures
propagate to the caller, which decides whether to absorb them.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from html import escape

from .links import build_verification_link

logger = logging.getLogger(__name__)

SUBJECT = "Verify Your Email Address"

_TEXT_BODY = """Hello,

Thank you for registering with us! Please verify your email address by opening the link below:

{link}

This verification link will expire in {ttl_hours} hours. If you didn't create an account, please ignore this email.
"""

_HTML_BODY = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Verify Your Email</title></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1>Email Verification</h1>
  <p>Hello,</p>
  <p>Thank you for registering with us! Please verify your email address by clicking the link below:</p>
  <p><a href="{link}">Verify Email Address</a></p>
  <p style="word-break: break-all; font-size: 12px;">{link}</p>
  <p style="font-size: 12px;">This verification link will expire in {ttl_hours} hours.
  If you didn't create an account, please ignore this email.</p>
</body>
</html>
"""


class SmtpNotifier:
    """
    Implements Notifier protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str,
        from_name: str,
        use_tls: bool = True,
        timeout: float = 30.0,
        ttl_hours: int = 24,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from = formataddr((from_name, from_address))
        self._use_tls = use_tls
        self._timeout = timeout
        self._ttl_hours = ttl_hours

    def build_message(self, email: str, token: str, base_link: str) -> EmailMessage:
        """Compose the verification email for recipient."""
        link = build_verification_link(base_link, token)
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self._from
        message["To"] = email
        message.set_content(_TEXT_BODY.format(link=link, ttl_hours=self._ttl_hours))
        message.add_alternative(
            _HTML_BODY.format(link=escape(link), ttl_hours=self._ttl_hours), subtype="html"
        )
        return message

    def send_verification(self, email: str, token: str, base_link: str) -> None:
        """
        Send the verification email.

        Raises:
            smtplib.SMTPException, OSError: On delivery failure
        """
        message = self.build_message(email, token, base_link)
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls(context=ssl.create_default_context())
            if self._username:
                server.login(self._username, self._password)
            server.send_message(message)
        logger.info("Verification email sent to %s", email)
