"""Daemon hosting the interval clock and applying CLI commands."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from pomoline.clock import AsyncioTickSource, IntervalClock, TickSource
from pomoline.core.config import Config, get_config
from pomoline.core.control import (
    ACTION_PAUSE,
    ACTION_REWIND,
    ACTION_START,
    ACTION_STATUS,
    ACTION_STOP,
    clear_controls,
    read_controls,
)
from pomoline.core.errors import InactiveClock
from pomoline.notify import Notifier, build_notifier
from pomoline.status import StatusFile, StatusSurface

logger = logging.getLogger(__name__)


class ClockDaemon:
    """Owns the single IntervalClock of the process.

    Manages the PID file, signal handling and the control queue loop that
    turns CLI commands into clock operations.
    """

    def __init__(
        self,
        config: Config | None = None,
        tick_source: TickSource | None = None,
        notifier: Notifier | None = None,
        surface: StatusSurface | None = None,
    ):
        self.config = config or get_config()
        self._running = False
        self._stopped = asyncio.Event()

        self.clock = IntervalClock(
            self.config.clock.to_clock_config(),
            tick_source=tick_source or AsyncioTickSource(),
            notifier=notifier or build_notifier(self.config.notifications),
            surface=surface or StatusFile(self.config.status_file),
            icon=self.config.notifications.icon,
            tick_seconds=self.config.clock.tick_seconds,
        )

        self._pid_file = self.config.pid_file
        self._control_dir = self.config.control_dir

    @property
    def is_running(self) -> bool:
        """Check if the daemon is running."""
        return self._running

    async def start(self) -> None:
        """Start the daemon and the clock."""
        if self._running:
            logger.warning("Daemon already running")
            return

        logger.info("Starting pomoline daemon...")

        try:
            self.config.ensure_directories()
            self._write_pid_file()
            # Commands left over from a previous run must not leak into this one.
            clear_controls(self._control_dir)

            self.clock.start()

            self._running = True
            self._stopped.clear()
            self._setup_signal_handlers()

            logger.info("pomoline daemon started successfully")

        except Exception as e:
            logger.error(f"Failed to start daemon: {e}")
            await self.stop()
            raise

    async def stop(self) -> None:
        """Stop the clock and cleanup."""
        logger.info("Stopping pomoline daemon...")

        self._running = False
        if self.clock.is_running:
            self.clock.stop()
        self._remove_pid_file()
        self._stopped.set()

        logger.info("pomoline daemon stopped")

    async def run(self) -> None:
        """Apply control commands until stopped."""
        while self._running:
            for ctrl in read_controls(self._control_dir):
                self.handle_action(ctrl.get("action"))
                if not self._running:
                    break
            if not self._running:
                break
            try:
                await asyncio.wait_for(
                    self._stopped.wait(), timeout=self.config.control_poll_seconds
                )
            except asyncio.TimeoutError:
                pass

    def handle_action(self, action: str | None) -> None:
        """Apply one control command to the clock."""
        logger.debug(f"Control command: {action}")
        try:
            if action == ACTION_START:
                self.clock.start()
            elif action == ACTION_REWIND:
                self.clock.rewind()
            elif action == ACTION_PAUSE:
                self.clock.toggle_pause()
            elif action == ACTION_STATUS:
                self.clock.status()
            elif action == ACTION_STOP:
                if self.clock.is_running:
                    self.clock.stop()
                self._running = False
            else:
                logger.warning(f"Ignoring unknown control action: {action}")
        except InactiveClock as e:
            logger.warning(str(e))

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
            except (NotImplementedError, RuntimeError):
                # Not the main thread, or a platform without signal support.
                logger.debug(f"Cannot install handler for {sig.name}")

    def _handle_signal(self, sig: signal.Signals) -> None:
        """Handle shutdown signals."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        self._running = False
        self._stopped.set()

    def _write_pid_file(self) -> None:
        """Write PID file for daemon management."""
        self._pid_file.parent.mkdir(parents=True, exist_ok=True)
        self._pid_file.write_text(str(os.getpid()))
        logger.debug(f"PID file written: {self._pid_file}")

    def _remove_pid_file(self) -> None:
        """Remove PID file."""
        if self._pid_file.exists():
            self._pid_file.unlink()
            logger.debug("PID file removed")


def get_daemon_pid(config: Config) -> int | None:
    """Get the PID of a running daemon from PID file."""
    pid_file = config.pid_file
    if not pid_file.exists():
        return None
    try:
        pid = int(pid_file.read_text().strip())
        # Check if process is actually running
        os.kill(pid, 0)
        return pid
    except (ValueError, OSError):
        # Process not running or invalid PID
        pid_file.unlink(missing_ok=True)
        return None


def is_daemon_running(config: Config) -> bool:
    """Check if daemon is currently running."""
    return get_daemon_pid(config) is not None


async def run_daemon(config: Config | None = None) -> None:
    """Run the daemon until stopped."""
    daemon = ClockDaemon(config)

    try:
        await daemon.start()
        await daemon.run()
    finally:
        await daemon.stop()
