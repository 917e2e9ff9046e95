"""Notifiers for new listings."""

from .base import Notifier
from .console import ConsoleNotifier
from .mail import EmailNotifier, EmailSettings, render_digest

__all__ = [
    "Notifier",
    "ConsoleNotifier",
    "EmailNotifier",
    "EmailSettings",
    "render_digest",
]
