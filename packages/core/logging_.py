from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from packages.shared.paths import log_path, ensure_app_dirs

CONSOLE_HANDLER = "msas.console"
FILE_HANDLER = "msas.file"


def setup_logging() -> bool:
    """Install the console and file handlers once.

    Returns False when the log file cannot be created; console logging is
    still installed in that case.
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    installed = {h.get_name() for h in root.handlers}

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    if CONSOLE_HANDLER not in installed:
        # The server console shares the terminal, so only problems go there.
        ch = logging.StreamHandler()
        ch.set_name(CONSOLE_HANDLER)
        ch.setLevel(logging.WARNING)
        ch.setFormatter(fmt)
        root.addHandler(ch)

    if FILE_HANDLER in installed:
        return True

    try:
        ensure_app_dirs()
        fh = RotatingFileHandler(str(log_path()), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        return False
    fh.set_name(FILE_HANDLER)
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)
    root.addHandler(fh)
    return True
