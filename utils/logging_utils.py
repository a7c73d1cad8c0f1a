"""
Logging setup shared by the monitor, its collaborators and the tests.

Usage
-----
From the process entrypoint:

    from utils.logging_utils import setup_logging

    setup_logging(level="INFO", job_name="weather_alert")

From a module:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="collaborators/meteo_feed")
    logger.info("Polling meteo feed")

Every record carries a `job_name` (one per process) and a `tag` (one per
component), INFO and below go to stdout, WARNING and above to stderr.
"""

from __future__ import annotations

import logging
import logging.config
import re
from typing import Any, Mapping, Optional


# ---------------------------------------------------------------------------
# Bootstrap config (records emitted before setup_logging() runs)
# ---------------------------------------------------------------------------

BOOTSTRAP_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
BOOTSTRAP_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    level=logging.INFO,
    format=BOOTSTRAP_FORMAT,
    datefmt=BOOTSTRAP_DATEFMT,
)


DEFAULT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED: bool = False

# Telegram puts the bot token straight into the path: /bot<id>:<secret>/method
_BOT_TOKEN_RE = re.compile(r"/bot\d+:[A-Za-z0-9_-]+")


# ---------------------------------------------------------------------------
# Record filters
# ---------------------------------------------------------------------------

class MaxLevelFilter(logging.Filter):
    """Pass only records at or below `max_level` (keeps warnings off stdout)."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """
    Give every record a `tag`.

    Records that come through a tagged adapter keep their tag. Anything
    else (third-party loggers, plain `logging.getLogger`) gets the last
    dotted segment of its logger name, e.g. "urllib3.connectionpool" ->
    "connectionpool".
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            logger_name = getattr(record, "name", "")
            record.tag = logger_name.split(".")[-1] if logger_name else "-"
        return True


class JobNameFilter(logging.Filter):
    """Stamp the process-wide `job_name` onto every record ("-" if unset)."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self._job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self._job_name
        return True


# ---------------------------------------------------------------------------
# dictConfig builder and setup
# ---------------------------------------------------------------------------


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Return a dictConfig mapping for the monitor process.

    Parameters
    ----------
    level:
        Root logger level, name or number.
    log_format:
        Formatter pattern; the default expects `job_name` and `tag`.
    date_format:
        Pattern for `asctime`.
    job_name:
        Process label written into every record.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "job_name": {"()": JobNameFilter, "job_name": job_name},
            "stdout_max_info": {
                "()": MaxLevelFilter,
                "max_level": logging.INFO,
            },
        },
        "formatters": {
            "standard": {
                "format": log_format,
                "datefmt": date_format,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name", "stdout_max_info"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name"],
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["stdout", "stderr"],
        },
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """
    Apply the logging configuration once per process.

    Repeated calls are ignored unless `override_existing` is True, so
    library modules and tests can call it without clobbering the
    entrypoint's choice of level.
    """
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    config_dict = build_logging_config(
        level=level,
        log_format=log_format,
        date_format=date_format,
        job_name=job_name,
    )
    logging.config.dictConfig(config_dict)
    _CONFIGURED = True


def get_tagged_logger(
    name: str,
    *,
    tag: Optional[str] = None,
) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter that stamps `tag` onto every record.

    `tag` defaults to the last segment of `name`:

        logger = get_tagged_logger(__name__, tag="monitor")
        logger.info("tick")
    """
    base_logger = logging.getLogger(name)
    if tag is None:
        tag = name.split(".")[-1]
    return logging.LoggerAdapter(base_logger, {"tag": tag})


def mask_bot_token(url: str) -> str:
    """Return `url` with a Telegram bot token in its path replaced by ***.

    Examples
    --------
    - https://api.telegram.org/bot123:ABC/sendPhoto -> https://api.telegram.org/bot***/sendPhoto
    - https://www.sao.ru/tb/tcs/meteo/meteo_today.cgi -> unchanged
    """
    return _BOT_TOKEN_RE.sub("/bot***", url)
