import logging
import sys
from pathlib import Path

from fitcoach.config import get_settings

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("apscheduler", "httpx", "google_genai")


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    handler._fitcoach = True
    return handler


def setup_logging():
    """Configure logging for the application: a log file plus stdout."""
    settings = get_settings()
    level = logging.DEBUG if settings.debug else logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid stacking handlers when the app is reloaded
    if any(getattr(h, "_fitcoach", False) for h in root.handlers):
        return

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root.addHandler(_handler(logging.FileHandler(log_dir / "app.log"), logging.INFO, FILE_FORMAT))
    root.addHandler(_handler(logging.StreamHandler(sys.stdout), level, CONSOLE_FORMAT))

    # uvicorn logs through the root handlers
    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.error").handlers = []
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
