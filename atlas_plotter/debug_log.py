"""Optional debug log file, switched on with ``ATLASPLOTTER_DEBUG``."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from .settings import EditorSettings

logger = logging.getLogger("atlas_plotter")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_excepthook_installed = False


def _log_file_path(settings: EditorSettings) -> Path:
    path = Path(settings.debug_log)
    return path if path.is_absolute() else Path.cwd() / path


def _replace_file_handlers(root_logger: logging.Logger, handler: logging.Handler) -> None:
    stale = [h for h in root_logger.handlers if isinstance(h, logging.FileHandler)]
    for existing in stale:
        root_logger.removeHandler(existing)
        existing.close()
    root_logger.addHandler(handler)


def _install_excepthook(root_logger: logging.Logger) -> None:
    global _excepthook_installed
    if _excepthook_installed:
        return
    chained = sys.excepthook

    def hook(exc_type, exc_value, exc_traceback):
        root_logger.error("Uncaught %s", exc_type.__name__, exc_info=(exc_type, exc_value, exc_traceback))
        chained(exc_type, exc_value, exc_traceback)

    sys.excepthook = hook
    _excepthook_installed = True


def setup_debug_logging(settings: EditorSettings | None = None) -> Path | None:
    """Route every ``atlas_plotter`` record to a fresh log file when debugging is on.

    Returns the log file path, or ``None`` when debugging is off.
    """
    settings = settings or EditorSettings.from_env()
    if not settings.debug:
        logger.addHandler(logging.NullHandler())
        return None
    log_path = _log_file_path(settings)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    _replace_file_handlers(root_logger, handler)
    root_logger.info("Atlas Plotter debug logging enabled at %s", log_path)
    _install_excepthook(root_logger)
    return log_path
