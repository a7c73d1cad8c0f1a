"""Interfaces the monitor core consumes; implementations live beside this module."""

from __future__ import annotations

from typing import Protocol

from weather_alert.domain import Chart, Observation, TwilightWindow


class WeatherSource(Protocol):
    """Anything that can provide the most recent weather sample."""

    def get_latest(self) -> Observation:
        """Return the newest observation, raising FetchError or ParseError."""
        ...


class ChartSource(Protocol):
    """Anything that can materialize the current conditions chart locally."""

    def get_updated_chart(self) -> Chart:
        """Return a reference to a fresh local chart image, raising FetchError."""
        ...


class Notifier(Protocol):
    """Delivery channel for lifecycle events and weather updates."""

    def work_started(self, window: TwilightWindow) -> None:
        """Announce that monitoring started for the night `window`."""
        ...

    def work_ended(self) -> None:
        """Announce that monitoring stopped at dawn."""
        ...

    def update(self, chart: Chart, observation: Observation, hazardous: bool) -> None:
        """Publish the current chart and observation, flagged as hazardous or not."""
        ...
