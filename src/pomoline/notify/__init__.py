"""Desktop notifications for clock events."""

from pomoline.notify.dispatch import dispatch
from pomoline.notify.notifier import (
    DesktopNotifier,
    Notifier,
    NullNotifier,
    build_notifier,
    detect_backend,
)

__all__ = [
    "dispatch",
    "DesktopNotifier",
    "Notifier",
    "NullNotifier",
    "build_notifier",
    "detect_backend",
]
