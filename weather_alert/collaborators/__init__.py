"""Collaborators the monitor core talks to: weather feed, chart, notifier."""

from .base import ChartSource, Notifier, WeatherSource
from .chart import HttpChartSource
from .factory import build_chart_source, build_notifier, build_weather_source
from .http import build_session
from .log_notifier import LogNotifier
from .meteo_feed import MeteoFeedSource, parse_record
from .telegram import TelegramNotifier

__all__ = [
    "ChartSource",
    "Notifier",
    "WeatherSource",
    "HttpChartSource",
    "LogNotifier",
    "MeteoFeedSource",
    "TelegramNotifier",
    "build_chart_source",
    "build_notifier",
    "build_session",
    "build_weather_source",
    "parse_record",
]
