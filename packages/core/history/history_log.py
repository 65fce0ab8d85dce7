from __future__ import annotations

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from packages.core.server.supervisor import ExitClassification
from packages.shared.paths import history_path

log = logging.getLogger(__name__)

MAX_ENTRIES = 5

_STATUS_TEXT = {
    ExitClassification.NORMAL: "正常終了",
    ExitClassification.ABNORMAL: "異常終了",
}


@dataclass(frozen=True)
class RunOutcome:
    stopped_at: datetime
    classification: ExitClassification

    @property
    def stop_time_of_day(self) -> str:
        return self.stopped_at.strftime("%H:%M:%S")

    def format_entry(self) -> str:
        return (
            f"[{self.stopped_at:%Y-%m-%d %H:%M:%S}] サーバー停止 | "
            f"状態: {_STATUS_TEXT[self.classification]} | "
            f"停止時刻: {self.stop_time_of_day}"
        )


class HistoryLog:
    """Rolling ledger of the most recent server stops, oldest first."""

    def __init__(self, path: Optional[Path] = None, max_entries: int = MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._path = path or history_path()
        self._max = max_entries

    @property
    def path(self) -> Path:
        return self._path

    def entries(self) -> List[str]:
        if not self._path.exists():
            return []
        raw = self._path.read_text(encoding="utf-8", errors="replace")
        return [line for line in raw.splitlines() if line.strip()]

    def append(self, outcome: RunOutcome) -> None:
        lines = self.entries()
        lines.append(outcome.format_entry())
        lines = lines[-self._max:]
        self._rewrite(lines)
        log.info("History updated (%d entries): %s", len(lines), self._path)

    def _rewrite(self, lines: List[str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".history-", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write("\n".join(lines) + "\n")
            os.chmod(tmp, self._file_mode())
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _file_mode(self) -> int:
        # mkstemp creates 0600; keep the ledger as readable as a plain create would.
        if self._path.exists():
            return stat.S_IMODE(self._path.stat().st_mode)
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
