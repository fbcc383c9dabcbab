"""Logging configuration with Rich formatting.

setup_logging() runs once when the web app is imported; modules use get_logger().
"""

import logging
from rich.logging import RichHandler
from .config import get_settings

# SDK and transport loggers that echo every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google.generativeai")

def setup_logging():
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)]
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("reviewlens").info(
        f"Logging ready (level {settings.LOG_LEVEL}, provider {settings.MODEL_PROVIDER})"
    )

def get_logger(name: str):
    return logging.getLogger(f"reviewlens.{name}")
