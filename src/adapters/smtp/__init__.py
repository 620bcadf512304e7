"""Notifier adapters - Verification link delivery."""

from .console import ConsoleNotifier
from .links import build_verification_link
from .mailer import SmtpNotifier

__all__ = ["ConsoleNotifier", "SmtpNotifier", "build_verification_link"]
