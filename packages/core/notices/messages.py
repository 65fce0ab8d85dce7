from __future__ import annotations

from datetime import datetime

from packages.shared.config import Settings

TITLE = "MC Server Auto Shutdown System"


def settings_lines(cfg: Settings) -> list[str]:
    return [
        f"サーバーフォルダ  : {cfg.server_folder}",
        f"JARファイル名    : {cfg.server_jar}",
        f"シャットダウンまで: {cfg.countdown_seconds}秒",
        f"シャットダウン時間帯: {cfg.shutdown_time_start} ～ {cfg.shutdown_time_end}",
    ]


def setup_summary(cfg: Settings) -> str:
    return (
        "設定完了:\n"
        f"  フォルダ: {cfg.server_folder} / JAR: {cfg.server_jar}\n"
        f"  停止後 {cfg.countdown_seconds}秒 でシャットダウン "
        f"({cfg.shutdown_time_start} ～ {cfg.shutdown_time_end} の間のみ)"
    )


def countdown_banner(seconds: int) -> list[str]:
    return [
        "MCサーバーが停止しました",
        f"{seconds}秒後にPCをシャットダウンします",
        "キャンセルするには Enter を押してください",
    ]


def countdown_tick(remaining: int) -> str:
    return f"残り {remaining:3d}秒..."


def outside_window(stopped_at: datetime, window: str) -> str:
    return (
        f"現在時刻 {stopped_at:%H:%M} はシャットダウン時間帯 ({window}) 外のため、"
        "シャットダウンしません"
    )


CANCELLED = "シャットダウンをキャンセルしました"
SHUTTING_DOWN = "シャットダウンします..."
PRESS_ENTER_TO_EXIT = "Enterを押すと終了します..."
PRESS_ENTER_TO_START = "Enterを押すとサーバーを起動します..."
KEEP_SETTINGS = "設定をそのまま使用します。"
SETTINGS_SAVED = "設定を保存しました！"
