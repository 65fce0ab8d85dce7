from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, PositiveInt


class Settings(BaseModel):
    server_folder: str = "server"
    server_jar: str = "forge-server.jar"
    countdown_seconds: PositiveInt = 60
    # Kept as plain text: a corrupted window must still reach the gate,
    # which fails open on it.
    shutdown_time_start: str = "02:00"
    shutdown_time_end: str = "08:00"

    def jar_path(self) -> Path:
        return Path(self.server_folder) / self.server_jar

    def to_window_config(self) -> dict:
        return {
            "start": self.shutdown_time_start,
            "end": self.shutdown_time_end,
        }
