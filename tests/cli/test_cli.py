import os
import signal
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from pomoline import __version__
from pomoline.cli.main import STOP_WAIT_SECONDS, app
from pomoline.clock.state import ClockStatus, Phase
from pomoline.core.config import Config
from pomoline.core.control import read_controls
from pomoline.status import StatusFile


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp.cleanup)
        base = Path(self._temp.name)
        self.config = Config(
            data_dir=base / "data",
            log_dir=base / "logs",
            config_dir=base / "cfg",
        )
        patcher = patch("pomoline.cli.main.get_config", return_value=self.config)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.runner = CliRunner()

    def _fake_daemon(self) -> None:
        """Pretend a daemon runs by pointing the PID file at this process."""
        self.config.pid_file.parent.mkdir(parents=True, exist_ok=True)
        self.config.pid_file.write_text(str(os.getpid()))

    def _pending_actions(self) -> list[str]:
        return [c["action"] for c in read_controls(self.config.control_dir)]

    def test_version(self) -> None:
        result = self.runner.invoke(app, ["version"])
        self.assertEqual(0, result.exit_code)
        self.assertIn(__version__, result.output)

    def test_commands_without_daemon_fail(self) -> None:
        for command in ("rewind", "pause", "status", "stop"):
            with self.subTest(command=command):
                result = self.runner.invoke(app, [command])
                self.assertEqual(1, result.exit_code)
                self.assertIn("Clock is not running", result.output)
                self.assertEqual([], self._pending_actions())

    def test_rewind_sends_action(self) -> None:
        self._fake_daemon()
        result = self.runner.invoke(app, ["rewind"])
        self.assertEqual(0, result.exit_code)
        self.assertEqual(["rewind"], self._pending_actions())

    def test_pause_sends_action(self) -> None:
        self._fake_daemon()
        result = self.runner.invoke(app, ["pause"])
        self.assertEqual(0, result.exit_code)
        self.assertEqual(["pause"], self._pending_actions())

    def test_status_prints_panel_and_requests_notification(self) -> None:
        self._fake_daemon()
        StatusFile(self.config.status_file).publish(ClockStatus(Phase.SHORT_BREAK, 2, 4))

        result = self.runner.invoke(app, ["status"])

        self.assertEqual(0, result.exit_code)
        self.assertIn("B2-4", result.output)
        self.assertIn("Short break", result.output)
        self.assertEqual(["status"], self._pending_actions())

    def test_back_to_back_commands_are_all_queued(self) -> None:
        self._fake_daemon()
        StatusFile(self.config.status_file).publish(ClockStatus(Phase.WORK, 1, 25))

        self.assertEqual(0, self.runner.invoke(app, ["pause"]).exit_code)
        self.assertEqual(0, self.runner.invoke(app, ["status"]).exit_code)

        self.assertEqual(["pause", "status"], self._pending_actions())

    def test_status_without_notification(self) -> None:
        self._fake_daemon()
        StatusFile(self.config.status_file).publish(ClockStatus(Phase.WORK, 1, 25, paused=True))

        result = self.runner.invoke(app, ["status", "--no-notify"])

        self.assertEqual(0, result.exit_code)
        self.assertIn("W1-25", result.output)
        self.assertIn("yes", result.output)
        self.assertEqual([], self._pending_actions())

    def test_status_before_first_publish(self) -> None:
        self._fake_daemon()
        result = self.runner.invoke(app, ["status", "--no-notify"])
        self.assertEqual(0, result.exit_code)
        self.assertIn("No status published yet", result.output)

    def test_line_prints_status_line(self) -> None:
        self._fake_daemon()
        StatusFile(self.config.status_file).publish(ClockStatus(Phase.LONG_BREAK, 1, 12))
        result = self.runner.invoke(app, ["line"])
        self.assertEqual(0, result.exit_code)
        self.assertEqual("LB-12\n", result.output)

    def test_line_is_empty_when_stopped(self) -> None:
        StatusFile(self.config.status_file).publish(ClockStatus(Phase.WORK, 1, 3))
        result = self.runner.invoke(app, ["line"])
        self.assertEqual(0, result.exit_code)
        self.assertEqual("\n", result.output)

    def test_start_restarts_running_daemon(self) -> None:
        self._fake_daemon()
        with patch("pomoline.cli.main.subprocess.Popen") as popen:
            result = self.runner.invoke(app, ["start"])
        self.assertEqual(0, result.exit_code)
        self.assertEqual(["start"], self._pending_actions())
        popen.assert_not_called()

    def test_start_foreground_runs_daemon(self) -> None:
        with patch("pomoline.core.daemon.run_daemon", new=AsyncMock()) as run_daemon, patch(
            "pomoline.cli.main.setup_logging"
        ) as setup_logging:
            result = self.runner.invoke(app, ["start", "--foreground", "-l", "DEBUG"])

        self.assertEqual(0, result.exit_code)
        run_daemon.assert_awaited_once_with(self.config)
        setup_logging.assert_called_once_with("DEBUG")

    def test_start_launches_background_daemon(self) -> None:
        with patch("pomoline.cli.main.subprocess.Popen") as popen, patch(
            "pomoline.cli.main.time.sleep"
        ), patch(
            "pomoline.cli.main.is_daemon_running", side_effect=[False, True]
        ), patch("pomoline.cli.main.get_daemon_pid", return_value=4242):
            result = self.runner.invoke(app, ["start"])

        self.assertEqual(0, result.exit_code)
        self.assertIn("4242", result.output)
        cmd = popen.call_args.args[0]
        self.assertEqual(["-m", "pomoline", "start", "--foreground", "--log-level", "INFO"], cmd[1:])
        self.assertTrue(popen.call_args.kwargs["start_new_session"])

    def test_start_reports_failed_launch(self) -> None:
        with patch("pomoline.cli.main.subprocess.Popen"), patch(
            "pomoline.cli.main.time.sleep"
        ), patch("pomoline.cli.main.is_daemon_running", return_value=False):
            result = self.runner.invoke(app, ["start"])

        self.assertEqual(1, result.exit_code)
        self.assertIn("Failed to start daemon", result.output)

    def test_stop_waits_for_daemon_exit(self) -> None:
        with patch("pomoline.cli.main.get_daemon_pid", return_value=4242), patch(
            "pomoline.cli.main.is_daemon_running", side_effect=[True, False]
        ), patch("pomoline.cli.main.time.sleep"), patch("pomoline.cli.main.os.kill") as kill:
            result = self.runner.invoke(app, ["stop"])

        self.assertEqual(0, result.exit_code)
        self.assertIn("Clock stopped", result.output)
        self.assertEqual(["stop"], self._pending_actions())
        kill.assert_not_called()

    def test_stop_escalates_to_sigterm(self) -> None:
        alive = [True] * STOP_WAIT_SECONDS + [False]
        with patch("pomoline.cli.main.get_daemon_pid", return_value=4242), patch(
            "pomoline.cli.main.is_daemon_running", side_effect=alive
        ), patch("pomoline.cli.main.time.sleep"), patch("pomoline.cli.main.os.kill") as kill:
            result = self.runner.invoke(app, ["stop"])

        self.assertEqual(0, result.exit_code)
        self.assertIn("Clock stopped", result.output)
        kill.assert_called_once_with(4242, signal.SIGTERM)

    def test_stop_reports_daemon_surviving_sigterm(self) -> None:
        with patch("pomoline.cli.main.get_daemon_pid", return_value=4242), patch(
            "pomoline.cli.main.is_daemon_running", return_value=True
        ), patch("pomoline.cli.main.time.sleep"), patch("pomoline.cli.main.os.kill") as kill:
            result = self.runner.invoke(app, ["stop"])

        self.assertEqual(1, result.exit_code)
        self.assertIn("Daemon still running", result.output)
        self.assertNotIn("Clock stopped", result.output)
        kill.assert_called_once_with(4242, signal.SIGTERM)

    def test_config_show(self) -> None:
        result = self.runner.invoke(app, ["config-show"])
        self.assertEqual(0, result.exit_code)
        self.assertIn("Sets Until Long Break", result.output)
        self.assertIn("25 min", result.output)
        self.assertIn("130 min", result.output)

    def test_logs(self) -> None:
        result = self.runner.invoke(app, ["logs"])
        self.assertEqual(1, result.exit_code)

        self.config.log_dir.mkdir(parents=True)
        (self.config.log_dir / "daemon.log").write_text(
            "\n".join(f"line {i} [x]" for i in range(5)) + "\n"
        )
        result = self.runner.invoke(app, ["logs", "-n", "2"])
        self.assertEqual(0, result.exit_code)
        self.assertNotIn("line 2", result.output)
        self.assertIn("line 3 [x]", result.output)
        self.assertIn("line 4 [x]", result.output)


if __name__ == "__main__":
    unittest.main()
