"""Logging configuration for newsletter ingestion."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Logger of the extraction engine; per-candidate discards are logged at DEBUG
EXTRACTION_LOGGER = "src.newsletters.extraction"

# Third-party loggers that are too chatty below INFO
NOISY_LOGGERS: tuple[str, ...] = ("urllib3", "bs4", "charset_normalizer")


def _parse_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "false").strip().lower() in {"1", "true", "yes"}


def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging to stdout only.

    Env vars:
      - LOG_LEVEL: DEBUG/INFO/WARNING/ERROR/CRITICAL (default INFO)
      - LOG_EXTRACTION_DEBUG: true/false (default false), log every discarded
        candidate regardless of LOG_LEVEL

    :param level: Level name overriding LOG_LEVEL.
    :raises ValueError: If the level name is unknown.
    """
    level_name = level or os.environ.get("LOG_LEVEL", "INFO")
    numeric_level = _parse_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))

    extraction_logger = logging.getLogger(EXTRACTION_LOGGER)
    if _env_flag("LOG_EXTRACTION_DEBUG"):
        extraction_logger.setLevel(logging.DEBUG)
    else:
        extraction_logger.setLevel(logging.NOTSET)

    logging.getLogger(__name__).info(f"Logging configured: level={level_name.upper()}")
