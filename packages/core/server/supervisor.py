"""
Runs the game server in the foreground and classifies how it ended.

The child inherits this terminal's stdin/stdout/stderr so the operator can
type server console commands. Nothing is restarted or retried.
"""

from __future__ import annotations

import logging
import signal
import time
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

import psutil

from packages.core.notices.console import OperatorConsole, RichConsole

log = logging.getLogger(__name__)

JAVA_EXECUTABLE = "java"
JVM_ARGS: tuple[str, ...] = ("-Xmx4G",)
SERVER_ARGS: tuple[str, ...] = ("nogui",)

PathLike = Union[str, Path]


class ExitClassification(str, Enum):
    NORMAL = "NORMAL"
    ABNORMAL = "ABNORMAL"


def describe_returncode(returncode: int) -> str:
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return f"signal: {name}"
    return f"exit status {returncode}"


class ProcessSupervisor:
    def __init__(
        self,
        console: Optional[OperatorConsole] = None,
        java: str = JAVA_EXECUTABLE,
        jvm_args: Sequence[str] = JVM_ARGS,
        server_args: Sequence[str] = SERVER_ARGS,
    ) -> None:
        self._console = console or RichConsole()
        self._java = java
        self._jvm_args = list(jvm_args)
        self._server_args = list(server_args)

    def build_command(self, jar_path: PathLike) -> list[str]:
        # Absolute, because the child starts inside the server folder.
        jar = Path(jar_path).resolve()
        return [self._java, *self._jvm_args, "-jar", str(jar), *self._server_args]

    def run(self, jar_path: PathLike, working_dir: PathLike) -> ExitClassification:
        cmd = self.build_command(jar_path)
        self._console.say(f"\nサーバーを起動します... ({jar_path})\n")
        log.info("Launching server: %s (cwd=%s)", cmd, working_dir)

        started = time.monotonic()
        try:
            proc = psutil.Popen(cmd, cwd=str(working_dir))
        except OSError as e:
            log.info("Server launch failed: %s", e)
            self._console.say(f"サーバーが異常終了しました: {e}")
            return ExitClassification.ABNORMAL

        returncode = self._wait(proc)
        elapsed = time.monotonic() - started
        log.info("Server pid %s exited with %s after %.0fs", proc.pid, returncode, elapsed)

        if returncode == 0:
            self._console.say("サーバーが正常に終了しました")
            return ExitClassification.NORMAL

        self._console.say(f"サーバーが異常終了しました: {describe_returncode(returncode)}")
        return ExitClassification.ABNORMAL

    @staticmethod
    def _wait(proc: psutil.Popen) -> int:
        # Ctrl+C reaches the server too; keep waiting for its own exit.
        while True:
            try:
                return proc.wait()
            except KeyboardInterrupt:
                log.info("Interrupt received, waiting for server pid %s to exit", proc.pid)
