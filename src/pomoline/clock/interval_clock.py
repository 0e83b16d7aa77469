"""Interval clock: work/short break/long break state machine driven by minute ticks."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from pomoline.clock.state import ClockConfig, ClockState, ClockStatus, Phase
from pomoline.clock.ticks import TickSource
from pomoline.clock.transitions import TickOutcome, advance, build_notification
from pomoline.core.errors import InactiveClock
from pomoline.notify import Notifier, dispatch
from pomoline.status import StatusSurface

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 60.0


class IntervalClock:
    """Pomodoro clock owning one ClockState and one tick source handle.

    Usage:
        clock = IntervalClock(
            ClockConfig(25, 5, 15, 4),
            tick_source=AsyncioTickSource(),
            notifier=build_notifier(config.notifications),
            surface=StatusFile(config.status_file),
        )
        clock.start()          # W1-25, "Work" notification
        clock.toggle_pause()   # ticks keep arriving but change nothing
        clock.rewind()         # restart the current work set
        clock.status()         # notify the current phase
        clock.stop()

    All methods are synchronous and must be called from the thread that
    runs the tick source (the asyncio event loop for AsyncioTickSource),
    so commands and ticks never interleave.
    """

    def __init__(
        self,
        config: ClockConfig,
        tick_source: TickSource,
        notifier: Notifier,
        surface: StatusSurface,
        icon: str | Path | None = None,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
    ):
        self.config = config
        self.tick_source = tick_source
        self.notifier = notifier
        self.surface = surface
        self.icon = icon
        self.tick_seconds = tick_seconds

        self._state: ClockState | None = None
        self._handle = None

    @property
    def is_running(self) -> bool:
        return self._state is not None and self._state.running

    @property
    def state(self) -> ClockState | None:
        """Current state, None when stopped."""
        return self._state

    def snapshot(self) -> ClockStatus | None:
        """Current status without side effects."""
        if self._state is None:
            return None
        return self._state.to_status()

    def start(self) -> ClockStatus:
        """Start a fresh sequence at the first work set.

        Any previous run is canceled and discarded, never resumed.
        """
        self.config.validate()
        self._cancel_ticks()

        self._state = ClockState.initial(self.config)
        self._handle = self.tick_source.schedule(self.tick_seconds, self.tick)

        logger.info(
            f"Clock started: work={self.config.work_minutes}m "
            f"short={self.config.short_break_minutes}m "
            f"long={self.config.long_break_minutes}m "
            f"sets={self.config.sets_until_long_break}"
        )
        return self._announce()

    def rewind(self) -> ClockStatus:
        """Restart the current work set, keeping the set index."""
        state = self._require_running("rewind")
        self._state = replace(
            state,
            phase=Phase.WORK,
            minutes_remaining=self.config.work_minutes,
        )
        logger.info(f"Clock rewound to work set {state.set_index}")
        return self._announce()

    def stop(self) -> None:
        """Cancel the tick source and discard the state."""
        self._require_running("stop")
        self._cancel_ticks()
        self._state = None
        self.surface.clear()
        logger.info("Clock stopped")

    def toggle_pause(self) -> bool:
        """Flip the paused flag and return the new value."""
        state = self._require_running("pause")
        self._state = replace(state, paused=not state.paused)
        self.surface.publish(self._state.to_status())
        logger.info("Clock paused" if self._state.paused else "Clock resumed")
        return self._state.paused

    def status(self) -> ClockStatus:
        """Return the current status and show it as a notification."""
        state = self._require_running("status")
        status = state.to_status()
        dispatch(self.notifier, build_notification(status), self.icon)
        return status

    def tick(self) -> TickOutcome | None:
        """Advance one minute. Called by the tick source."""
        if self._state is None or not self._state.running:
            return None
        if self._state.paused:
            logger.debug("Tick ignored while paused")
            return None

        outcome = advance(self._state, self.config)
        self._state = outcome.state

        if outcome.notification is not None:
            logger.info(
                f"Phase change: {outcome.state.phase.value} "
                f"set={outcome.state.set_index} "
                f"minutes={outcome.state.minutes_remaining}"
            )
            dispatch(self.notifier, outcome.notification, self.icon)
        else:
            logger.debug(f"Tick: {outcome.state.to_status().line}")

        # The notification goes out even if publishing fails
        self.surface.publish(outcome.state.to_status())
        return outcome

    def _announce(self) -> ClockStatus:
        status = self._state.to_status()
        dispatch(self.notifier, build_notification(status), self.icon)
        self.surface.publish(status)
        return status

    def _require_running(self, command: str) -> ClockState:
        if self._state is None or not self._state.running:
            raise InactiveClock(f"Cannot {command}: clock is not running")
        return self._state

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self.tick_source.cancel(self._handle)
            self._handle = None
