from __future__ import annotations

import logging
import tempfile
import threading
import unittest
from datetime import datetime
from pathlib import Path

from apps.console.flow import FlowEnd, ShutdownFlow
from packages.core.countdown.controller import CountdownController
from packages.core.history.history_log import HistoryLog
from packages.core.power.shutdown import ShutdownResult
from packages.core.server.supervisor import ExitClassification
from packages.shared.config import Settings


class _RecordingConsole:
    def __init__(self) -> None:
        self.lines: list[str] = []
        self.pauses: list[str] = []
        self.ticks: list[str] = []

    def say(self, text: str) -> None:
        self.lines.append(text)

    def banner(self, lines, style=None) -> None:
        self.lines.extend(lines)

    def tick(self, text: str) -> None:
        self.ticks.append(text)

    def pause(self, prompt: str) -> None:
        self.pauses.append(prompt)


class _FakeSupervisor:
    def __init__(self, classification: ExitClassification) -> None:
        self.classification = classification
        self.calls = []

    def run(self, jar_path, working_dir) -> ExitClassification:
        self.calls.append((jar_path, working_dir))
        return self.classification


class _FakeExecutor:
    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.calls = 0

    def execute(self) -> ShutdownResult:
        self.calls += 1
        return ShutdownResult(self.ok, None if self.ok else "boom")


class _GatedStream:
    def __init__(self) -> None:
        self.release = threading.Event()

    def readline(self) -> str:
        self.release.wait()
        return "\n"


class ShutdownFlowTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.history = HistoryLog(Path(self._tmp.name) / "System.log")
        self.console = _RecordingConsole()
        self.executor = _FakeExecutor()
        self.stream = _GatedStream()
        self.sleeps = 0
        self.cancel_on_sleep = None
        self.countdown = CountdownController(
            render=lambda remaining: self.console.tick(str(remaining)),
            input_stream=self.stream,
            sleep=self._sleep,
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _sleep(self, seconds: float) -> None:
        self.sleeps += 1
        if self.sleeps == self.cancel_on_sleep:
            self.stream.release.set()
            self.countdown.signal.wait(2.0)

    def _flow(self, settings: Settings, now: datetime, classification=ExitClassification.NORMAL, running=()):
        self.supervisor = _FakeSupervisor(classification)
        return ShutdownFlow(
            settings,
            self.console,
            supervisor=self.supervisor,
            history=self.history,
            countdown=self.countdown,
            executor=self.executor,
            clock=lambda: now,
            find_running=lambda jar: list(running),
        )

    def test_inside_window_counts_down_and_shuts_down(self) -> None:
        flow = self._flow(Settings(countdown_seconds=3), datetime(2026, 10, 19, 3, 0))
        self.assertIs(flow.run(), FlowEnd.SHUTDOWN_REQUESTED)
        self.assertEqual(self.executor.calls, 1)
        self.assertEqual(self.console.ticks, ["3", "2", "1"])
        self.assertEqual(self.supervisor.calls, [(Path("server") / "forge-server.jar", "server")])

    def test_outside_window_skips_after_acknowledgment(self) -> None:
        flow = self._flow(Settings(), datetime(2026, 10, 19, 12, 0))
        self.assertIs(flow.run(), FlowEnd.OUTSIDE_WINDOW)
        self.assertEqual(self.executor.calls, 0)
        self.assertEqual(self.sleeps, 0)
        self.assertEqual(len(self.console.pauses), 1)
        self.assertTrue(any("12:00" in line and "02:00 ～ 08:00" in line for line in self.console.lines))

    def test_wrapping_window(self) -> None:
        settings = Settings(countdown_seconds=1, shutdown_time_start="22:00", shutdown_time_end="06:00")
        self.assertIs(self._flow(settings, datetime(2026, 10, 19, 23, 30)).run(), FlowEnd.SHUTDOWN_REQUESTED)
        self.assertIs(self._flow(settings, datetime(2026, 10, 19, 10, 0)).run(), FlowEnd.OUTSIDE_WINDOW)

    def test_cancel_at_tick_two_never_shuts_down(self) -> None:
        self.cancel_on_sleep = 2
        flow = self._flow(Settings(countdown_seconds=5), datetime(2026, 10, 19, 3, 0))
        self.assertIs(flow.run(), FlowEnd.CANCELLED)
        self.assertEqual(self.executor.calls, 0)
        self.assertEqual(self.console.ticks, ["5", "4"])

    def test_abnormal_exit_is_logged_and_flow_continues(self) -> None:
        flow = self._flow(Settings(countdown_seconds=1), datetime(2026, 10, 19, 3, 0), ExitClassification.ABNORMAL)
        self.assertIs(flow.run(), FlowEnd.SHUTDOWN_REQUESTED)
        entries = self.history.entries()
        self.assertEqual(len(entries), 1)
        self.assertIn("状態: 異常終了", entries[0])
        self.assertIn("停止時刻: 03:00:00", entries[0])

    def test_corrupted_window_fails_open(self) -> None:
        settings = Settings(countdown_seconds=1, shutdown_time_start="nope")
        self.assertIs(self._flow(settings, datetime(2026, 10, 19, 12, 0)).run(), FlowEnd.SHUTDOWN_REQUESTED)

    def test_history_failure_does_not_stop_flow(self) -> None:
        blocker = Path(self._tmp.name) / "file"
        blocker.write_text("x", encoding="utf-8")
        self.history = HistoryLog(blocker / "System.log")
        flow = self._flow(Settings(), datetime(2026, 10, 19, 12, 0))
        self.assertIs(flow.run(), FlowEnd.OUTSIDE_WINDOW)
        self.assertTrue(any(line.startswith("ログの書き込みに失敗しました") for line in self.console.lines))

    def test_console_messages_are_not_repeated_as_warnings(self) -> None:
        blocker = Path(self._tmp.name) / "file"
        blocker.write_text("x", encoding="utf-8")
        self.history = HistoryLog(blocker / "System.log")
        flow = self._flow(Settings(), datetime(2026, 10, 19, 12, 0), running=[77])
        with self.assertLogs("apps.console.flow", level="INFO") as logs:
            flow.run()
        self.assertTrue(logs.records)
        self.assertTrue(all(r.levelno < logging.WARNING for r in logs.records))

    def test_shutdown_failure_is_reported(self) -> None:
        self.executor = _FakeExecutor(ok=False)
        flow = self._flow(Settings(countdown_seconds=1), datetime(2026, 10, 19, 3, 0))
        self.assertIs(flow.run(), FlowEnd.SHUTDOWN_FAILED)

    def test_warns_when_server_already_running(self) -> None:
        flow = self._flow(Settings(), datetime(2026, 10, 19, 12, 0), running=[77])
        flow.run()
        self.assertTrue(any("PID: 77" in line for line in self.console.lines))


if __name__ == "__main__":
    unittest.main()
