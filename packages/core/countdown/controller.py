"""
Cancellable shutdown countdown.

State machine: TICKING -> FIRED | CANCELLED

The ticker runs in the calling thread and is the only writer of the
remaining seconds. A daemon listener thread blocks on one line of operator
input and fires a one-shot cancel signal. The listener is never joined; it
is left behind once the countdown resolves.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TextIO

log = logging.getLogger(__name__)


class CountdownOutcome(str, Enum):
    FIRED = "FIRED"
    CANCELLED = "CANCELLED"


@dataclass
class CountdownState:
    remaining_seconds: int
    cancelled: bool = False


class CancelSignal:
    """One-shot, single-writer cancel flag."""

    def __init__(self) -> None:
        self._evt = threading.Event()

    def fire(self) -> bool:
        if self._evt.is_set():
            return False
        self._evt.set()
        return True

    def is_set(self) -> bool:
        return self._evt.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._evt.wait(timeout)


class CountdownController:
    def __init__(
        self,
        render: Optional[Callable[[int], None]] = None,
        input_stream: Optional[TextIO] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._render = render or (lambda remaining: None)
        self._input = input_stream
        self._sleep = sleep
        self._signal: Optional[CancelSignal] = None
        self._state: Optional[CountdownState] = None

    @property
    def signal(self) -> Optional[CancelSignal]:
        return self._signal

    @property
    def state(self) -> Optional[CountdownState]:
        return self._state

    def run(self, total_seconds: int) -> CountdownOutcome:
        if isinstance(total_seconds, bool) or not isinstance(total_seconds, int) or total_seconds <= 0:
            raise ValueError(f"countdown must be a positive number of seconds, got {total_seconds!r}")

        self._signal = CancelSignal()
        self._state = CountdownState(remaining_seconds=total_seconds)
        self._start_listener(self._signal)
        log.info("Countdown started: %ds", total_seconds)

        try:
            return self._tick(self._signal, self._state)
        finally:
            self._state = None

    def _tick(self, signal: CancelSignal, state: CountdownState) -> CountdownOutcome:
        while state.remaining_seconds > 0:
            if signal.is_set():
                return self._resolve(state, CountdownOutcome.CANCELLED)
            self._render(state.remaining_seconds)
            self._sleep(1.0)
            state.remaining_seconds -= 1

        # A line typed during the last second still wins.
        if signal.is_set():
            return self._resolve(state, CountdownOutcome.CANCELLED)
        return self._resolve(state, CountdownOutcome.FIRED)

    def _resolve(self, state: CountdownState, outcome: CountdownOutcome) -> CountdownOutcome:
        state.cancelled = outcome is CountdownOutcome.CANCELLED
        log.info("Countdown resolved: %s with %ds remaining", outcome.value, state.remaining_seconds)
        return outcome

    def _start_listener(self, signal: CancelSignal) -> None:
        stream = self._input if self._input is not None else sys.stdin
        thread = threading.Thread(
            target=self._listen,
            args=(stream, signal),
            name="CountdownCancelListener",
            daemon=True,
        )
        thread.start()

    @staticmethod
    def _listen(stream: TextIO, signal: CancelSignal) -> None:
        try:
            line = stream.readline()
        except (OSError, ValueError) as e:
            log.warning("Reading cancel input failed (%s), treating as cancel", e)
        else:
            if not line:
                log.info("Cancel input reached end of stream, treating as cancel")
        signal.fire()
