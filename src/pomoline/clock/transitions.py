"""Pure transition and formatting functions of the interval clock.

Nothing here touches the tick source, the notifier or the status surface;
the IntervalClock applies the results.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from pomoline.clock.state import (
    ClockConfig,
    ClockNotification,
    ClockState,
    ClockStatus,
    Phase,
)


@dataclass(frozen=True)
class TickOutcome:
    """Result of one tick: the new state and the notification to deliver, if any."""
    state: ClockState
    notification: ClockNotification | None = None

    @property
    def transitioned(self) -> bool:
        return self.notification is not None


def next_phase(state: ClockState, config: ClockConfig) -> ClockState:
    """Apply the phase transition table to an expired interval."""
    if state.phase == Phase.LONG_BREAK:
        return replace(
            state,
            phase=Phase.WORK,
            minutes_remaining=config.work_minutes,
            set_index=1,
        )

    if state.phase == Phase.SHORT_BREAK:
        return replace(
            state,
            phase=Phase.WORK,
            minutes_remaining=config.work_minutes,
            set_index=state.set_index + 1,
        )

    if state.set_index >= config.sets_until_long_break:
        return replace(
            state,
            phase=Phase.LONG_BREAK,
            minutes_remaining=config.long_break_minutes,
            set_index=1,
        )

    return replace(
        state,
        phase=Phase.SHORT_BREAK,
        minutes_remaining=config.short_break_minutes,
    )


def advance(state: ClockState, config: ClockConfig) -> TickOutcome:
    """Advance the clock by one minute.

    Paused or stopped clocks are returned unchanged. A countdown reaching
    zero triggers exactly one transition and yields the notification for
    the new phase.
    """
    if not state.running or state.paused:
        return TickOutcome(state=state)

    remaining = state.minutes_remaining - 1
    if remaining > 0:
        return TickOutcome(state=replace(state, minutes_remaining=remaining))

    new_state = next_phase(replace(state, minutes_remaining=0), config)
    return TickOutcome(
        state=new_state,
        notification=build_notification(new_state.to_status()),
    )


def format_line(phase: Phase, set_index: int, minutes_remaining: int) -> str:
    """Format the status line for a phase."""
    if phase == Phase.WORK:
        return f"W{set_index}-{minutes_remaining}"
    elif phase == Phase.SHORT_BREAK:
        return f"B{set_index}-{minutes_remaining}"
    else:
        return f"LB-{minutes_remaining}"


def build_notification(status: ClockStatus) -> ClockNotification:
    """Notification describing the given phase and set."""
    return ClockNotification(
        title=status.title,
        body=f"{status.set_index} set\n{status.minutes_remaining} minute(s) left",
    )
