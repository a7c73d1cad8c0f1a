"""Download the station's conditions chart to a local file."""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Callable

import requests

from weather_alert.domain import Chart
from weather_alert.errors import FetchError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="collaborators/chart")


class HttpChartSource:
    """ChartSource that re-downloads the chart image to `path` on every call."""

    def __init__(
        self,
        url: str,
        path: str | Path,
        session: requests.Session,
        *,
        timeout: float = 10.0,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> None:
        self.url = url
        self.path = Path(path)
        self.session = session
        self.timeout = timeout
        self._clock = clock or (lambda: dt.datetime.now(dt.timezone.utc))

    def get_updated_chart(self) -> Chart:
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"chart download from {self.url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise FetchError(f"unexpected chart response from {self.url}: {resp.status_code}")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(resp.content)
        except OSError as exc:
            raise FetchError(f"failed to save chart to {self.path}: {exc}") from exc

        logger.debug("Saved chart (%d bytes) to %s", len(resp.content), self.path)
        return Chart(path=str(self.path), created_at=self._clock())
