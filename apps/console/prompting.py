from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt


def ask_text(message: str, default: str = "", console: Optional[Console] = None) -> str:
    return str(Prompt.ask(message, default=default, console=console))


def ask_confirm(message: str, default: bool = False, console: Optional[Console] = None) -> bool:
    return bool(Confirm.ask(message, default=default, console=console))
