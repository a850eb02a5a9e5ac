"""Notifiers package."""

from hfdaily.notifiers.base import Notifier
from hfdaily.notifiers.googlechat import GoogleChatNotifier

__all__ = [
    "Notifier",
    "GoogleChatNotifier",
]
