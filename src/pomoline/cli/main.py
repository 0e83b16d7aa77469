"""CLI commands for pomoline using Typer."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pomoline import __version__
from pomoline.clock.state import Phase
from pomoline.core.config import Config, get_config
from pomoline.core.control import (
    ACTION_PAUSE,
    ACTION_REWIND,
    ACTION_START,
    ACTION_STATUS,
    ACTION_STOP,
    write_control,
)
from pomoline.core.daemon import get_daemon_pid, is_daemon_running
from pomoline.status import read_status_file

# Initialize Typer app
app = typer.Typer(
    name="pomoline",
    help="Pomodoro interval clock for your status line.",
    add_completion=False,
)

console = Console()

STOP_WAIT_SECONDS = 10


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _require_daemon(config: Config) -> int:
    """Return the daemon PID or exit with the not-running message."""
    pid = get_daemon_pid(config)
    if pid is None:
        console.print("[red]Clock is not running[/red]")
        console.print("Use 'pomoline start' to begin a sequence.")
        raise typer.Exit(1)
    return pid


@app.command()
def start(
    foreground: bool = typer.Option(
        False,
        "--foreground",
        "-f",
        help="Run in foreground instead of as daemon",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Start a new Pomodoro sequence (restarts a running one)."""
    config = get_config()
    log_level = log_level or config.log_level

    if is_daemon_running(config):
        write_control(config.control_dir, ACTION_START)
        console.print("[green]Sequence restarted at work set 1[/green]")
        return

    log_path = config.log_dir / "daemon.log"

    if foreground:
        setup_logging(log_level)
        console.print("[green]Starting pomoline in foreground...[/green]")
        console.print("Press Ctrl+C to stop\n")

        from pomoline.core.daemon import run_daemon

        try:
            asyncio.run(run_daemon(config))
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopped[/yellow]")
        return

    console.print("[green]Starting pomoline daemon...[/green]")
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Launch a detached copy of ourselves in foreground mode
    with open(log_path, "a") as log_file:
        subprocess.Popen(
            [sys.executable, "-m", "pomoline", "start", "--foreground", "--log-level", log_level],
            stdin=subprocess.DEVNULL,
            stdout=log_file,
            stderr=log_file,
            start_new_session=True,
        )

    # Wait a moment then check if started
    time.sleep(1.5)

    if is_daemon_running(config):
        console.print(f"[green]Daemon started (PID: {get_daemon_pid(config)})[/green]")
        console.print(f"Logs: {log_path}")
    else:
        console.print("[red]Failed to start daemon - check logs[/red]")
        raise typer.Exit(1)


@app.command()
def stop() -> None:
    """Stop the clock and its daemon."""
    config = get_config()
    pid = _require_daemon(config)

    console.print(f"[yellow]Stopping clock (PID: {pid})...[/yellow]")
    write_control(config.control_dir, ACTION_STOP)

    for _ in range(STOP_WAIT_SECONDS):
        time.sleep(1)
        if not is_daemon_running(config):
            console.print("[green]Clock stopped[/green]")
            return

    console.print("[yellow]Daemon not responding, sending SIGTERM...[/yellow]")
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        pass

    time.sleep(1)
    if is_daemon_running(config):
        console.print(f"[red]Daemon still running (PID: {pid})[/red]")
        raise typer.Exit(1)
    console.print("[green]Clock stopped[/green]")


@app.command()
def rewind() -> None:
    """Restart the current work set without changing the set number."""
    config = get_config()
    _require_daemon(config)
    write_control(config.control_dir, ACTION_REWIND)
    console.print("[green]Rewound to the start of the work set[/green]")


@app.command()
def pause() -> None:
    """Toggle pause; paused minutes are not counted."""
    config = get_config()
    _require_daemon(config)
    write_control(config.control_dir, ACTION_PAUSE)
    console.print("[green]Sent pause toggle[/green]")


@app.command()
def status(
    notify: bool = typer.Option(
        True,
        "--notify/--no-notify",
        help="Also show the status as a desktop notification",
    ),
) -> None:
    """Show the current phase, set and minutes left."""
    config = get_config()
    _require_daemon(config)

    if notify:
        write_control(config.control_dir, ACTION_STATUS)

    data = read_status_file(config.status_file)
    if data is None:
        console.print("[yellow]No status published yet[/yellow]")
        return

    phase = Phase(data["phase"])

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("Line", f"[bold]{data['line']}[/bold]")
    table.add_row("Phase", phase.title)
    table.add_row("Set", str(data["set_index"]))
    table.add_row("Minutes left", str(data["minutes_remaining"]))
    table.add_row("Paused", "[yellow]yes[/yellow]" if data.get("paused") else "no")

    border = "green" if phase == Phase.WORK else "blue"
    console.print(Panel(table, title="pomoline", border_style=border))


@app.command()
def line() -> None:
    """Print only the status line, for status bars."""
    config = get_config()
    data = read_status_file(config.status_file) if is_daemon_running(config) else None
    typer.echo(data["line"] if data else "")


@app.command()
def config_show() -> None:
    """Show current configuration."""
    config = get_config()

    table = Table(title="pomoline Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    # Paths
    table.add_row("[bold]Paths[/bold]", "")
    table.add_row("  Data Directory", str(config.data_dir))
    table.add_row("  Log Directory", str(config.log_dir))
    table.add_row("  Config File", str(config.config_file))
    table.add_row("  Status File", str(config.status_file))

    # Clock
    table.add_row("[bold]Clock[/bold]", "")
    table.add_row("  Work", f"{config.clock.work_minutes} min")
    table.add_row("  Short Break", f"{config.clock.short_break_minutes} min")
    table.add_row("  Long Break", f"{config.clock.long_break_minutes} min")
    table.add_row("  Sets Until Long Break", str(config.clock.sets_until_long_break))
    table.add_row("  Full Cycle", f"{config.clock.to_clock_config().cycle_minutes} min")
    table.add_row("  Tick", f"{config.clock.tick_seconds:g}s")

    # Notifications
    table.add_row("[bold]Notifications[/bold]", "")
    table.add_row("  Enabled", str(config.notifications.enabled))
    table.add_row("  Backend", config.notifications.backend)
    table.add_row("  Icon", config.notifications.icon or "-")

    console.print(table)


@app.command()
def logs(
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines to show"),
) -> None:
    """View daemon logs."""
    config = get_config()
    log_file = config.log_dir / "daemon.log"

    if not log_file.exists():
        console.print("[yellow]No log file found. Start the daemon first.[/yellow]")
        raise typer.Exit(1)

    with open(log_file) as f:
        all_lines = f.readlines()
        for log_line in all_lines[-lines:]:
            console.print(log_line.rstrip(), markup=False)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"pomoline v{__version__}")


@app.callback()
def main_callback() -> None:
    """pomoline - Pomodoro interval clock for your status line."""
    pass


if __name__ == "__main__":
    app()
