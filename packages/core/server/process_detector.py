from __future__ import annotations

import psutil


def find_running_servers(jar_name: str) -> list[int]:
    """Pids of processes whose command line mentions ``jar_name``."""
    needle = jar_name.strip().lower()
    if not needle:
        return []
    pids: list[int] = []
    for p in psutil.process_iter(attrs=["pid", "cmdline"]):
        try:
            cmdline = p.info.get("cmdline") or []
            if any(needle in str(arg).lower() for arg in cmdline):
                pids.append(int(p.info["pid"]))
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return pids
