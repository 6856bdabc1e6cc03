"""Notifiers package."""

from feedkeep.notifiers.base import Notifier
from feedkeep.notifiers.log import LogNotifier

__all__ = [
    "Notifier",
    "LogNotifier",
]
