"""Interval clock: state machine, transitions and tick sources."""

from pomoline.clock.interval_clock import DEFAULT_TICK_SECONDS, IntervalClock
from pomoline.clock.state import (
    ClockConfig,
    ClockNotification,
    ClockState,
    ClockStatus,
    Phase,
)
from pomoline.clock.ticks import AsyncioTickSource, TickSource
from pomoline.clock.transitions import (
    TickOutcome,
    advance,
    build_notification,
    format_line,
    next_phase,
)

__all__ = [
    "DEFAULT_TICK_SECONDS",
    "IntervalClock",
    "ClockConfig",
    "ClockNotification",
    "ClockState",
    "ClockStatus",
    "Phase",
    "AsyncioTickSource",
    "TickSource",
    "TickOutcome",
    "advance",
    "build_notification",
    "format_line",
    "next_phase",
]
