"""
Module: host

Purpose:
    Host application collaborators: where documents come from, where
    previews go, and how the user is notified.
"""

from .environment import HostEnvironment, Notifier, RulerUnits, scoped_environment
from .memory import InMemoryHost, LoggingNotifier, RecordingNotifier

__all__ = [
    "HostEnvironment",
    "Notifier",
    "RulerUnits",
    "scoped_environment",
    "InMemoryHost",
    "LoggingNotifier",
    "RecordingNotifier",
]
