"""Exceptions raised by the interval clock and its host."""


class PomolineError(Exception):
    """Base exception for pomoline."""


class InvalidConfiguration(PomolineError, ValueError):
    """Raised when the clock schedule is not made of positive integers."""


class InactiveClock(PomolineError):
    """Raised when a command is issued while the clock is not running."""


class NotificationFailed(PomolineError):
    """Raised by a notifier when the desktop notification could not be shown."""
