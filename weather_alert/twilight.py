"""Nautical dusk/dawn for the night around a given instant."""
from __future__ import annotations

import datetime as dt
from typing import Callable

from astral import Depression, Observer
from astral import sun

from weather_alert.domain import TwilightWindow
from weather_alert.errors import ScheduleError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="twilight")

# Shifting back half a day before taking the calendar date makes every
# instant between two local noons resolve to the same night, so the
# window does not flip over at midnight.
REFERENCE_SHIFT = dt.timedelta(hours=12)

SunEvent = Callable[..., dt.datetime]


def as_utc(value: dt.datetime) -> dt.datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def solar_timezone(longitude: float) -> dt.timezone:
    """Local mean solar time at `longitude` (4 minutes per degree east of Greenwich)."""
    return dt.timezone(dt.timedelta(minutes=round(longitude * 4)))


def _crossing(
    event: SunEvent,
    observer: Observer,
    date: dt.date,
    local: dt.tzinfo,
    label: str,
) -> dt.datetime:
    """Return the nautical crossing on local `date` in UTC, truncated to whole seconds."""
    try:
        when = event(observer, date=date, tzinfo=local, depression=Depression.NAUTICAL)
    except ValueError as exc:
        raise ScheduleError(
            f"no nautical {label} on {date.isoformat()} at "
            f"lat={observer.latitude}, lon={observer.longitude}: {exc}"
        ) from exc
    return when.astimezone(dt.timezone.utc).replace(microsecond=0)


def compute_window(
    reference: dt.datetime,
    latitude: float,
    longitude: float,
    elevation: float = 0.0,
) -> TwilightWindow:
    """
    Return the nautical twilight window of the night containing `reference`.

    Calendar dates are reckoned in local mean solar time, where evening and
    morning twilight fall on either side of midnight: dusk is taken on the
    local date of `reference - 12h`, dawn on the following local date. Both
    instants are returned in UTC. Raises ScheduleError when the sun never
    reaches -12 degrees at the location on either date.
    """
    observer = Observer(latitude=latitude, longitude=longitude, elevation=elevation)
    local = solar_timezone(longitude)
    night = (as_utc(reference).astimezone(local) - REFERENCE_SHIFT).date()

    dusk = _crossing(sun.dusk, observer, night, local, "dusk")
    dawn = _crossing(sun.dawn, observer, night + dt.timedelta(days=1), local, "dawn")
    if dusk >= dawn:
        raise ScheduleError(
            f"nautical dusk {dusk.isoformat()} does not precede dawn {dawn.isoformat()}"
        )
    return TwilightWindow(dusk=dusk, dawn=dawn)


class TwilightCalculator:
    """Twilight windows for one fixed observer location."""

    def __init__(self, latitude: float, longitude: float, elevation: float = 0.0) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.elevation = elevation

    @property
    def local_timezone(self) -> dt.timezone:
        return solar_timezone(self.longitude)

    def compute_window(self, reference: dt.datetime) -> TwilightWindow:
        window = compute_window(reference, self.latitude, self.longitude, self.elevation)
        local = self.local_timezone
        logger.debug(
            "Twilight window for %s: dusk=%s dawn=%s (local solar %s-%s)",
            reference.isoformat(),
            window.dusk.isoformat(),
            window.dawn.isoformat(),
            window.dusk.astimezone(local).strftime("%H:%M"),
            window.dawn.astimezone(local).strftime("%H:%M"),
        )
        return window
