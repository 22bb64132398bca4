"""Email adapters - Console and SMTP implementations."""

from .console import ConsoleEmailSender
from .mailer import SmtpEmailSender

__all__ = ["ConsoleEmailSender", "SmtpEmailSender"]
