"""Interactive review/edit of the settings before the server starts."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from packages.core.notices import messages
from packages.core.notices.console import OperatorConsole
from packages.core.schedule.time_window import TimeFormatError, parse_hhmm
from packages.shared.config import Settings
from packages.shared.store import ConfigStore

from . import prompting

log = logging.getLogger(__name__)


def _or_default(value: str, default: str) -> str:
    value = value.strip()
    return value or default


def _valid_seconds(value: str) -> bool:
    value = value.strip()
    return value.isascii() and value.isdigit() and int(value) > 0


def _valid_hhmm(value: str) -> bool:
    try:
        parse_hhmm(value.strip())
    except TimeFormatError:
        return False
    return True


class SetupWizard:
    def __init__(
        self,
        store: ConfigStore,
        console: OperatorConsole,
        ask_text: Optional[Callable[..., str]] = None,
        ask_confirm: Optional[Callable[..., bool]] = None,
    ) -> None:
        self._store = store
        self._console = console
        self._ask_text = ask_text or prompting.ask_text
        self._ask_confirm = ask_confirm or prompting.ask_confirm

    def run(self, cfg: Settings) -> Settings:
        self._console.banner([messages.TITLE])
        self._console.say("\n現在の設定:")
        for line in messages.settings_lines(cfg):
            self._console.say(f"  {line}")

        if not self._ask_confirm("変更しますか？", default=False):
            self._console.say("\n" + messages.KEEP_SETTINGS)
            self._console.pause(messages.PRESS_ENTER_TO_START)
            return cfg

        updated = self._edit(cfg)
        try:
            self._store.save(updated)
        except OSError as e:
            log.info("Saving settings to %s failed: %s", self._store.path(), e)
            self._console.say(f"設定の保存に失敗しました: {e}")
        else:
            self._console.say("\n" + messages.SETTINGS_SAVED)

        self._console.say("\n" + messages.setup_summary(updated))
        self._console.pause("\n" + messages.PRESS_ENTER_TO_START)
        return updated

    def _ask(
        self,
        message: str,
        default: str,
        valid: Optional[Callable[[str], bool]] = None,
        invalid_message: str = "",
    ) -> str:
        while True:
            raw = self._ask_text(message, default=default)
            value = _or_default(raw, default)
            if valid is None or valid(value):
                return value
            self._console.say(f"  {invalid_message}")

    def _edit(self, cfg: Settings) -> Settings:
        folder = self._ask("サーバーフォルダ名", cfg.server_folder)
        jar = self._ask("サーバーのJARファイル名", cfg.server_jar)
        seconds = self._ask(
            "シャットダウンまでの待機時間（秒）",
            str(cfg.countdown_seconds),
            _valid_seconds,
            "※ 正しい数値を入力してください",
        )
        start = self._ask(
            "シャットダウン開始時刻 (HH:MM)",
            cfg.shutdown_time_start,
            _valid_hhmm,
            "※ HH:MM 形式で入力してください (例: 02:00)",
        )
        end = self._ask(
            "シャットダウン終了時刻 (HH:MM)",
            cfg.shutdown_time_end,
            _valid_hhmm,
            "※ HH:MM 形式で入力してください (例: 08:00)",
        )

        return Settings(
            server_folder=folder,
            server_jar=jar,
            countdown_seconds=int(seconds),
            shutdown_time_start=start,
            shutdown_time_end=end,
        )
