# utils/logging_setup.py
import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def setup_logging(settings) -> None:
    """Console logging for the app and the uvicorn / fastapi loggers."""
    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    # avoid duplicate handlers on reload
    if not any(getattr(h, "_stock_master", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._stock_master = True
        root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(level)

    if settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
