from __future__ import annotations

import logging
from typing import Optional, Protocol

from rich.console import Console
from rich.control import Control
from rich.panel import Panel
from rich.text import Text

log = logging.getLogger(__name__)


class OperatorConsole(Protocol):
    def say(self, text: str) -> None:
        ...

    def banner(self, lines: list[str], style: Optional[str] = None) -> None:
        ...

    def tick(self, text: str) -> None:
        ...

    def pause(self, prompt: str) -> None:
        ...


class RichConsole:
    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(highlight=False)

    def say(self, text: str) -> None:
        self._console.print(text, markup=False)

    def banner(self, lines: list[str], style: Optional[str] = None) -> None:
        body = Text("\n".join(lines))
        if style is None:
            self._console.print(Panel(body, expand=False))
        else:
            self._console.print(Panel(body, expand=False, style=style))

    def tick(self, text: str) -> None:
        # Back to column 0 so each tick overwrites the previous one.
        self._console.control(Control.move_to_column(0))
        self._console.print(text, end="", markup=False, soft_wrap=True)

    def pause(self, prompt: str) -> None:
        try:
            self._console.input(prompt, markup=False)
        except EOFError:
            log.info("Input closed while waiting for acknowledgment")
