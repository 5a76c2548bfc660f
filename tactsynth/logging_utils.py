from __future__ import annotations

import logging
import os
import traceback
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .errors import TactSynthError

_LOGGER = logging.getLogger("tactsynth.logging")
LOG_DIR_ENV = "TACTSYNTH_LOG_DIR"
DEBUG_ENV = "TACTSYNTH_DEBUG"
_LOG_FILE = "tactsynth.log"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_HANDLER_TAG = "_tactsynth_handler"


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "tactsynth" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def configure_logging(*, force: bool = False) -> None:
    """Attach a rich console handler and a log-file handler to ``tactsynth``.

    Runs once per process unless ``force`` is set, which replaces the handlers
    installed by an earlier call (e.g. after ``TACTSYNTH_LOG_DIR`` changed).
    """
    logger = logging.getLogger("tactsynth")
    ours = [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]
    if ours and not force:
        return
    for handler in ours:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    console_level = logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.INFO
    console = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(_tag(console))

    try:
        get_log_dir().mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(get_log_path(), encoding="utf-8")
    except OSError as exc:
        _LOGGER.warning("Failed to open log file: %s", exc)
        return
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(_tag(file_handler))


def log_failure(stage: str, exc: BaseException) -> Path | None:
    """Append a failed stage, the note it stopped at, and the traceback to the log file."""
    path = get_log_path()
    lines = [f"[{datetime.now().isoformat()}] {stage} failed: {type(exc).__name__}: {exc}"]
    if isinstance(exc, TactSynthError) and exc.location is not None:
        lines.append(f"  stopped at {exc.location}")
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write("\n".join(lines) + "\n" + trace + "\n")
    except OSError as log_exc:
        _LOGGER.warning("Failed to write log file: %s", log_exc)
        return None
    return path
