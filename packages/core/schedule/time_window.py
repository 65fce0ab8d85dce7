"""
Daily shutdown time window.

Boundaries are "HH:MM" strings. The start minute is inclusive and the end
minute exclusive; a start later than the end wraps past midnight.
A boundary that does not parse opens the gate instead of closing it.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, time
from typing import Union

log = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

_FIELD_RE = re.compile(r"[0-9]+")


class TimeFormatError(ValueError):
    """Raised when a boundary is not a strict HH:MM value."""


def parse_hhmm(text: str) -> tuple[int, int]:
    parts = text.split(":")
    if len(parts) != 2:
        raise TimeFormatError(f"invalid format: {text!r}")
    if not all(_FIELD_RE.fullmatch(p) for p in parts):
        raise TimeFormatError(f"invalid value: {text!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if hour > 23 or minute > 59:
        raise TimeFormatError(f"invalid value: {text!r}")
    return hour, minute


def minutes_since_midnight(hour: int, minute: int) -> int:
    return hour * 60 + minute


def is_within_window(now: Union[datetime, time], start: str, end: str) -> bool:
    try:
        start_minutes = minutes_since_midnight(*parse_hhmm(start))
        end_minutes = minutes_since_midnight(*parse_hhmm(end))
    except TimeFormatError as e:
        log.info("Shutdown window %r-%r unreadable (%s), allowing shutdown", start, end, e)
        return True

    now_minutes = minutes_since_midnight(now.hour, now.minute)

    if start_minutes <= end_minutes:
        return start_minutes <= now_minutes < end_minutes
    return now_minutes >= start_minutes or now_minutes < end_minutes


class TimeWindowGate:
    def __init__(self, start: str, end: str) -> None:
        self._start = start
        self._end = end

    @classmethod
    def from_config(cls, config: dict) -> "TimeWindowGate":
        return cls(config["start"], config["end"])

    def allows(self, now: Union[datetime, time]) -> bool:
        allowed = is_within_window(now, self._start, self._end)
        log.info("Window %s at %02d:%02d -> %s", self.describe(), now.hour, now.minute, "open" if allowed else "closed")
        return allowed

    def describe(self) -> str:
        return f"{self._start} ～ {self._end}"
