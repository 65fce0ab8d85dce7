from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from packages.shared.config import Settings
from packages.shared.paths import config_path

log = logging.getLogger(__name__)


class ConfigStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or config_path()

    def load(self) -> Settings:
        if not self._path.exists():
            cfg = Settings()
            try:
                self.save(cfg)
            except OSError:
                log.exception("Failed to write default config to %s", self._path)
            return cfg

        try:
            raw = self._path.read_text(encoding="utf-8")
            data: Any = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.warning("Ignoring unreadable config %s: %s", self._path, e)
            return Settings()

        if not isinstance(data, dict):
            log.warning("Ignoring config %s: top level is not an object", self._path)
            return Settings()

        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"]}
            log.warning("Invalid config fields %s in %s, using defaults for them", sorted(map(str, bad)), self._path)
            kept = {k: v for k, v in data.items() if k not in bad}
            return Settings.model_validate(kept)

    def save(self, cfg: Settings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(cfg.model_dump_json(indent=2), encoding="utf-8")

    def path(self) -> str:
        return str(self._path)
