"""
Main flow: supervise the server, record the stop, then decide on power-off.

server exit -> history entry -> window check -> countdown -> shutdown
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from packages.core.countdown.controller import CountdownController, CountdownOutcome
from packages.core.history.history_log import HistoryLog, RunOutcome
from packages.core.notices import messages
from packages.core.notices.console import OperatorConsole
from packages.core.power.shutdown import ShutdownExecutor
from packages.core.schedule.time_window import TimeWindowGate
from packages.core.server.process_detector import find_running_servers
from packages.core.server.supervisor import ProcessSupervisor
from packages.shared.config import Settings

log = logging.getLogger(__name__)


class FlowEnd(str, Enum):
    OUTSIDE_WINDOW = "OUTSIDE_WINDOW"
    CANCELLED = "CANCELLED"
    SHUTDOWN_REQUESTED = "SHUTDOWN_REQUESTED"
    SHUTDOWN_FAILED = "SHUTDOWN_FAILED"


class ShutdownFlow:
    def __init__(
        self,
        settings: Settings,
        console: OperatorConsole,
        supervisor: Optional[ProcessSupervisor] = None,
        history: Optional[HistoryLog] = None,
        countdown: Optional[CountdownController] = None,
        executor: Optional[ShutdownExecutor] = None,
        clock: Callable[[], datetime] = datetime.now,
        find_running: Callable[[str], List[int]] = find_running_servers,
    ) -> None:
        self._cfg = settings
        self._console = console
        self._supervisor = supervisor or ProcessSupervisor(console)
        self._history = history or HistoryLog()
        self._countdown = countdown or CountdownController(
            render=lambda remaining: console.tick(messages.countdown_tick(remaining)),
        )
        self._executor = executor or ShutdownExecutor(console)
        self._gate = TimeWindowGate.from_config(settings.to_window_config())
        self._clock = clock
        self._find_running = find_running

    def run(self) -> FlowEnd:
        self._warn_if_already_running()

        classification = self._supervisor.run(self._cfg.jar_path(), self._cfg.server_folder)
        stopped_at = self._clock()
        self._record(RunOutcome(stopped_at=stopped_at, classification=classification))

        if not self._gate.allows(self._clock()):
            self._console.say("\n" + messages.outside_window(stopped_at, self._gate.describe()))
            self._console.pause(messages.PRESS_ENTER_TO_EXIT)
            return FlowEnd.OUTSIDE_WINDOW

        self._console.banner(messages.countdown_banner(self._cfg.countdown_seconds), style="bold")
        if self._countdown.run(self._cfg.countdown_seconds) is CountdownOutcome.CANCELLED:
            self._console.say("\n" + messages.CANCELLED)
            return FlowEnd.CANCELLED

        result = self._executor.execute()
        return FlowEnd.SHUTDOWN_REQUESTED if result.ok else FlowEnd.SHUTDOWN_FAILED

    def _warn_if_already_running(self) -> None:
        pids = self._find_running(self._cfg.server_jar)
        if pids:
            log.info("%s already running as pid(s) %s", self._cfg.server_jar, pids)
            self._console.say(
                f"※ {self._cfg.server_jar} は既に起動している可能性があります (PID: {', '.join(map(str, pids))})"
            )

    def _record(self, outcome: RunOutcome) -> None:
        try:
            self._history.append(outcome)
        except OSError as e:
            log.info("Writing history to %s failed: %s", self._history.path, e)
            self._console.say(f"ログの書き込みに失敗しました: {e}")
            return
        self._console.say(f"\nログを記録しました: {self._history.path}")
