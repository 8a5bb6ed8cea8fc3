from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple, Union

DEFAULT_LOG_PATH = os.path.join(os.path.expanduser("~"), ".repo-warden", "repo-warden.log")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

_MARKER = "_repo_warden_log_path"


def coerce_level(level: Union[int, str]) -> int:
    """Accept ``logging.DEBUG`` or ``"debug"``; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def _open_log_file(log_path: str) -> Tuple[logging.FileHandler, str]:
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path), log_path
    except OSError:
        fallback = str(Path.cwd() / "repo-warden.log")
        return logging.FileHandler(fallback), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: Union[int, str] = logging.INFO,
    also_console: bool = True,
) -> str:
    """Attach repo-warden's handlers to the root logger, once per process.

    Later calls only adjust the level. The sanitization helpers never log;
    this serves the workspace, command and CLI layers. If ``log_path`` cannot
    be opened, ``./repo-warden.log`` is used.

    Returns the file path actually in use.
    """
    root = logging.getLogger()
    root.setLevel(coerce_level(level))

    configured = getattr(root, _MARKER, None)
    if configured:
        return configured

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    file_handler, chosen_path = _open_log_file(log_path)
    handlers: list[logging.Handler] = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, _MARKER, chosen_path)
    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
