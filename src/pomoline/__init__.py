"""pomoline - Pomodoro interval clock for status lines."""

__version__ = "0.1.0"
