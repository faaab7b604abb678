import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from consultant_tracker.core.config import get_settings

settings = get_settings()

SERVICE_NAME = "consultant-tracker"


def get_formatter(use_json: bool) -> logging.Formatter:
    if use_json:
        return JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level"},
            static_fields={"service": SERVICE_NAME, "environment": settings.environment},
        )
    return logging.Formatter(
        fmt=f"%(asctime)s | %(levelname)s | %(name)s | [svc={SERVICE_NAME}] | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: str = settings.log_level,
    use_json: bool = settings.log_json,
) -> logging.Logger:
    """
    Sets up a logger with a stdout handler and, when a log dir is configured,
    a rotating file handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    logger.propagate = False  # Avoid double logging in root

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = get_formatter(use_json)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file and settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_dir / log_file), maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# === Preconfigured loggers ===
app_logger = setup_logger("consultant_tracker", log_file="app.log")
scheduler_logger = setup_logger("consultant_tracker.scheduler", log_file="scheduler.log")
report_logger = setup_logger("consultant_tracker.reports", log_file="reports.log")
