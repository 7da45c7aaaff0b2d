"""Report notification."""

from .mail import ConsoleMailer, Mailer, SesMailer

__all__ = ["ConsoleMailer", "Mailer", "SesMailer"]
