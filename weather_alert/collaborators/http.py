"""Shared HTTP session construction for the collaborators."""
from __future__ import annotations

import requests
from retry_requests import retry

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="collaborators/http")

USER_AGENT = "weather-alert/0.1 (+wind monitor)"


def build_session(retries: int = 3, backoff_factor: float = 0.2) -> requests.Session:
    """Return a requests session that retries connection errors and 5xx responses."""
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    logger.debug("Building HTTP session with %d retries", retries)
    return retry(session, retries=retries, backoff_factor=backoff_factor)
