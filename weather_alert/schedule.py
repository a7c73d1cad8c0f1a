"""Decide whether an instant falls inside the nightly work window."""
from __future__ import annotations

import datetime as dt
from typing import Protocol

from weather_alert.domain import TwilightWindow
from weather_alert.twilight import as_utc


class WindowProvider(Protocol):
    """Anything that can produce the twilight window around an instant."""

    def compute_window(self, reference: dt.datetime) -> TwilightWindow:
        """Return the window of the night containing `reference`."""
        ...


def _check_lead_time(lead_time: dt.timedelta) -> dt.timedelta:
    if lead_time < dt.timedelta(0):
        raise ValueError(f"lead time must not be negative, got {lead_time}")
    return lead_time


class ScheduleGate:
    """
    Work window is `[dusk - lead_time, dawn)`.

    Monitoring starts `lead_time` before nautical dusk so a storm building up
    in the evening is not missed, and stops exactly at nautical dawn.
    """

    def __init__(self, calculator: WindowProvider, lead_time: dt.timedelta = dt.timedelta(0)) -> None:
        self.calculator = calculator
        self.lead_time = _check_lead_time(lead_time)

    def window_for(self, now: dt.datetime) -> TwilightWindow:
        """Return the twilight window of the night around `now` (ScheduleError on failure)."""
        return self.calculator.compute_window(now)

    def is_work_time(self, now: dt.datetime, lead_time: dt.timedelta | None = None) -> bool:
        """True when `now` lies in `[dusk - lead_time, dawn)` of its night."""
        lead = self.lead_time if lead_time is None else _check_lead_time(lead_time)
        now = as_utc(now)
        window = self.window_for(now)
        return window.dusk - lead <= now < window.dawn
