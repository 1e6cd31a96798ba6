from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


def default_log_path() -> str:
    base = os.environ.get("LOCALAPPDATA") or str(Path.home() / ".local" / "state")
    return str(Path(base) / "devstation" / "devstation.log")


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    debug: bool = False,
) -> str:
    """Configure the diagnostic log file.

    Console output is the Console's job; this only records decisions and
    external commands. If the requested location cannot be written, the log
    goes to the working directory instead.

    Returns the actual file path being used.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(root, "_devstation_configured", False):
        return getattr(root, "_devstation_log_path", log_path or "")

    requested = log_path or default_log_path()
    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(requested, encoding="utf-8")
        chosen = requested
    except OSError:
        chosen = str(Path.cwd() / "devstation.log")
        handler = logging.FileHandler(chosen, encoding="utf-8")

    handler.setFormatter(fmt)
    root.addHandler(handler)

    setattr(root, "_devstation_configured", True)
    setattr(root, "_devstation_log_path", chosen)

    logging.getLogger(__name__).info("Logging initialized (requested=%s, actual=%s)", requested, chosen)
    return chosen
