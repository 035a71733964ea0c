import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"

_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        try:
            from gigboard.config import settings
            level = settings.log_level
        except Exception:
            return logging.INFO
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: int | str | None = None) -> None:
    """
    Configure the root logger for the API process and scripts.
    Sync endpoints run in a threadpool, so records carry the thread name.
    SQL statements are only logged when the level is DEBUG.
    """
    resolved = _resolve_level(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(resolved)
    if root.handlers:
        root.handlers.clear()
    root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if resolved <= logging.DEBUG else logging.WARNING)
