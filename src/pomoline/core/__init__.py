"""Core daemon components."""

from pomoline.core.errors import (
    InactiveClock,
    InvalidConfiguration,
    NotificationFailed,
    PomolineError,
)

__all__ = ["InactiveClock", "InvalidConfiguration", "NotificationFailed", "PomolineError"]
