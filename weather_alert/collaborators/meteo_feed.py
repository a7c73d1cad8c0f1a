"""Client for the BTA meteo station's fixed-width data file.

The station appends one whitespace-separated record per measurement to a
plain-text file, for example::

    19-Oct-2026 21:04:05  2  -3.4  81  771.2  256  12.7  2.3

Fields used: 0-1 timestamp (UTC), 3 temperature (deg C), 7 wind speed (m/s).
Only the tail of the file is downloaded (HTTP Range), and only when the
server's Last-Modified marker has moved since the previous poll.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

import requests

from weather_alert.domain import Observation
from weather_alert.errors import FetchError, ParseError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="collaborators/meteo_feed")

RECORD_TIME_FORMAT = "%d-%b-%Y %H:%M:%S"
MIN_FIELDS = 9
TEMPERATURE_FIELD = 3
WIND_SPEED_FIELD = 7


def _last_record(payload: str) -> str:
    """Return the last non-empty line of the downloaded tail."""
    for line in reversed(payload.splitlines()):
        if line.strip():
            return line.strip()
    raise ParseError("no data available in meteo feed tail")


def parse_record(line: str) -> Observation:
    """Parse one meteo record into an Observation, raising ParseError on bad input."""
    fields = line.split()
    if len(fields) < MIN_FIELDS:
        raise ParseError(f"malformed meteo record ({len(fields)} fields): {line!r}")

    try:
        wind_speed = float(fields[WIND_SPEED_FIELD])
    except ValueError as exc:
        raise ParseError(f"bad wind speed {fields[WIND_SPEED_FIELD]!r}") from exc

    try:
        temperature = float(fields[TEMPERATURE_FIELD])
    except ValueError as exc:
        raise ParseError(f"bad temperature {fields[TEMPERATURE_FIELD]!r}") from exc

    stamp = f"{fields[0]} {fields[1]}"
    try:
        observed_at = dt.datetime.strptime(stamp, RECORD_TIME_FORMAT).replace(tzinfo=dt.timezone.utc)
    except ValueError as exc:
        raise ParseError(f"bad record timestamp {stamp!r}") from exc

    return Observation(wind_speed=wind_speed, temperature=temperature, observed_at=observed_at)


class MeteoFeedSource:
    """WeatherSource backed by the station's data file over HTTP."""

    def __init__(
        self,
        url: str,
        session: requests.Session,
        *,
        timeout: float = 10.0,
        tail_bytes: int = 66,
    ) -> None:
        self.url = url
        self.session = session
        self.timeout = timeout
        self.tail_bytes = tail_bytes
        self._last_modified: Optional[str] = None
        self._current: Optional[Observation] = None

    def get_latest(self) -> Observation:
        """Return the newest record, reusing the cached one while the file is unchanged."""
        modified_at = self._last_update()
        if self._current is not None and modified_at is not None and modified_at == self._last_modified:
            logger.debug("Meteo feed unchanged since %s", modified_at)
            return self._current

        observation = parse_record(_last_record(self._fetch_tail()))
        self._last_modified = modified_at
        self._current = observation
        logger.info(
            "New meteo record at %s: wind=%.1f m/s temperature=%.1f C",
            observation.observed_at.isoformat(),
            observation.wind_speed,
            observation.temperature,
        )
        return observation

    def _last_update(self) -> Optional[str]:
        """HEAD the feed and return its Last-Modified header (None if absent)."""
        try:
            resp = self.session.head(self.url, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"HEAD {self.url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise FetchError(f"unexpected HEAD response from {self.url}: {resp.status_code}")
        return resp.headers.get("Last-Modified")

    def _fetch_tail(self) -> str:
        """Download the last `tail_bytes` bytes of the feed."""
        headers = {"Range": f"bytes=-{self.tail_bytes}"}
        try:
            resp = self.session.get(self.url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"GET {self.url} failed: {exc}") from exc

        if resp.status_code != 206:
            raise FetchError(f"unexpected GET response from {self.url}: {resp.status_code}")
        return resp.content.decode("ascii", errors="replace")
