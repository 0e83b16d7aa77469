"""Interval clock state: phases, schedule and snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pomoline.core.errors import InvalidConfiguration


class Phase(Enum):
    """Kind of interval the clock is counting down."""
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def title(self) -> str:
        """Human readable name used as notification title."""
        return PHASE_TITLES[self]


PHASE_TITLES = {
    Phase.WORK: "Work",
    Phase.SHORT_BREAK: "Short break",
    Phase.LONG_BREAK: "Long break",
}


@dataclass(frozen=True)
class ClockConfig:
    """Schedule of the interval clock, fixed for a run."""
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sets_until_long_break: int = 4

    def validate(self) -> None:
        """Raise InvalidConfiguration unless every value is a positive integer."""
        for name in (
            "work_minutes",
            "short_break_minutes",
            "long_break_minutes",
            "sets_until_long_break",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfiguration(
                    f"{name} must be a positive integer, got {value!r}"
                )

    def duration_of(self, phase: Phase) -> int:
        """Full length in minutes of an interval of the given phase."""
        if phase == Phase.WORK:
            return self.work_minutes
        elif phase == Phase.SHORT_BREAK:
            return self.short_break_minutes
        else:
            return self.long_break_minutes

    @property
    def cycle_minutes(self) -> int:
        """Minutes from the first work set to the next first work set."""
        return (
            self.work_minutes
            + (self.sets_until_long_break - 1) * (self.work_minutes + self.short_break_minutes)
            + self.long_break_minutes
        )


@dataclass(frozen=True)
class ClockState:
    """Mutable-by-replacement state of a running clock."""
    phase: Phase = Phase.WORK
    minutes_remaining: int = 25
    set_index: int = 1
    paused: bool = False
    running: bool = False

    @classmethod
    def initial(cls, config: ClockConfig) -> ClockState:
        """State right after start: first work set, full duration."""
        return cls(
            phase=Phase.WORK,
            minutes_remaining=config.work_minutes,
            set_index=1,
            paused=False,
            running=True,
        )

    def to_status(self) -> ClockStatus:
        return ClockStatus(
            phase=self.phase,
            set_index=self.set_index,
            minutes_remaining=self.minutes_remaining,
            paused=self.paused,
        )


@dataclass(frozen=True)
class ClockStatus:
    """Read-only view of the clock for status lines and notifications."""
    phase: Phase
    set_index: int
    minutes_remaining: int
    paused: bool = False

    @property
    def line(self) -> str:
        """Short status line, e.g. ``W1-25``."""
        from pomoline.clock.transitions import format_line

        return format_line(self.phase, self.set_index, self.minutes_remaining)

    @property
    def title(self) -> str:
        return self.phase.title

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "phase": self.phase.value,
            "set_index": self.set_index,
            "minutes_remaining": self.minutes_remaining,
            "paused": self.paused,
        }


@dataclass(frozen=True)
class ClockNotification:
    """Notification event produced on start, rewind, status and transitions."""
    title: str
    body: str
