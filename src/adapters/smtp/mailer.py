"""
SMTP email sender adapter - Implements EmailSender protocol.

Renders plain-text and HTML bodies for the registration and password
reset messages and delivers them through smtplib, using implicit TLS
(port 465) or plain SMTP depending on settings.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.config.settings import Settings

logger = logging.getLogger(__name__)

REGISTRATION_SUBJECT = "Registration successful"

REGISTRATION_TEXT = """Hello,

thank you for registering. Your activation code is:

    {code}

-- Accounts
"""

REGISTRATION_HTML = """<!DOCTYPE html>
<html>
<body>
    <p>Hello,</p>
    <p>thank you for registering. Your activation code is:</p>
    <p style="font-size: 20px; font-weight: 600;">{code}</p>
</body>
</html>
"""

RESET_SUBJECT = "Password reset"

RESET_TEXT = """Hello {name},

you requested a password reset. Your reset code is:

    {code}

If you didn't request this, you can safely ignore this email.

-- Accounts
"""

RESET_HTML = """<!DOCTYPE html>
<html>
<body>
    <p>Hello {name},</p>
    <p>you requested a password reset. Your reset code is:</p>
    <p style="font-size: 20px; font-weight: 600;">{code}</p>
    <p>If you didn't request this, you can safely ignore this email.</p>
</body>
</html>
"""


class SmtpEmailSender:
    """
    Implements EmailSender protocol via SMTP.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Delivery errors propagate; the account service treats them as
    best-effort and logs them.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def send_registration_code(self, email: str, code: str) -> None:
        message = self._create_message(
            to_email=email,
            subject=REGISTRATION_SUBJECT,
            text_body=REGISTRATION_TEXT.format(code=code),
            html_body=REGISTRATION_HTML.format(code=code),
        )
        self._send_email(email, message)

    def send_reset_code(self, email: str, code: str, display_name: str) -> None:
        name = display_name or "there"
        message = self._create_message(
            to_email=email,
            subject=RESET_SUBJECT,
            text_body=RESET_TEXT.format(name=name, code=code),
            html_body=RESET_HTML.format(name=name, code=code),
        )
        self._send_email(email, message)

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._settings.smtp_sender
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        settings = self._settings
        password = settings.smtp_password.get_secret_value()

        try:
            if settings.smtp_use_tls:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context) as server:
                    if settings.smtp_username:
                        server.login(settings.smtp_username, password)
                    server.send_message(message)
            else:
                with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
                    if settings.smtp_username:
                        server.login(settings.smtp_username, password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise
