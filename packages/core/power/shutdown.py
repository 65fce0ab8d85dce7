"""
Host power-off.

One native command, immediate and unconditional. The grace period has
already been spent in the countdown, so there is no delay and no retry.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from packages.core.notices import messages
from packages.core.notices.console import OperatorConsole, RichConsole

log = logging.getLogger(__name__)

WINDOWS_SHUTDOWN = (r"C:\Windows\System32\shutdown.exe", "/s", "/t", "0")
POSIX_SHUTDOWN = ("shutdown", "-h", "now")


@dataclass(frozen=True)
class ShutdownResult:
    ok: bool
    error: Optional[str] = None


def power_off_command(platform: str = sys.platform) -> list[str]:
    if platform.startswith("win"):
        return list(WINDOWS_SHUTDOWN)
    return list(POSIX_SHUTDOWN)


class ShutdownExecutor:
    def __init__(
        self,
        console: Optional[OperatorConsole] = None,
        command: Optional[Sequence[str]] = None,
    ) -> None:
        self._console = console or RichConsole()
        self._command = list(command) if command is not None else power_off_command()

    @property
    def command(self) -> list[str]:
        return list(self._command)

    def execute(self) -> ShutdownResult:
        self._console.say("\n" + messages.SHUTTING_DOWN)
        log.info("Running power-off command: %s", self._command)
        result = self._run()
        if not result.ok:
            log.info("Power-off failed: %s", result.error)
            self._console.say(f"エラー: {result.error}")
            self._console.pause(messages.PRESS_ENTER_TO_EXIT)
        return result

    def _run(self) -> ShutdownResult:
        try:
            completed = subprocess.run(self._command, check=False)
        except OSError as e:
            return ShutdownResult(False, str(e))
        if completed.returncode != 0:
            return ShutdownResult(False, f"exit status {completed.returncode}")
        return ShutdownResult(True)
