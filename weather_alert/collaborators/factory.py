"""Factory helpers for choosing collaborator implementations at startup."""

from __future__ import annotations

import requests

from weather_alert import config
from weather_alert.collaborators.base import ChartSource, Notifier, WeatherSource
from weather_alert.collaborators.chart import HttpChartSource
from weather_alert.collaborators.http import build_session
from weather_alert.collaborators.log_notifier import LogNotifier
from weather_alert.collaborators.meteo_feed import MeteoFeedSource
from weather_alert.errors import ConfigError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="collaborators/factory")


DEFAULT_NOTIFIER_NAME = "telegram"


def _session(settings: config.Settings, session: requests.Session | None) -> requests.Session:
    return session or build_session(retries=settings.http_retries)


def build_weather_source(
    settings: config.Settings | None = None,
    session: requests.Session | None = None,
) -> WeatherSource:
    """Instantiate the meteo feed client."""
    settings = settings or config.settings
    logger.info("Using meteo feed at %s", settings.weather_url)
    return MeteoFeedSource(
        settings.weather_url,
        _session(settings, session),
        timeout=settings.http_timeout_seconds,
        tail_bytes=settings.tail_bytes,
    )


def build_chart_source(
    settings: config.Settings | None = None,
    session: requests.Session | None = None,
) -> ChartSource:
    """Instantiate the chart downloader."""
    settings = settings or config.settings
    return HttpChartSource(
        settings.chart_url,
        settings.chart_path,
        _session(settings, session),
        timeout=settings.http_timeout_seconds,
    )


def build_notifier(
    settings: config.Settings | None = None,
    session: requests.Session | None = None,
) -> Notifier:
    """Instantiate the configured notifier backend."""
    settings = settings or config.settings
    backend = (settings.notifier_backend or DEFAULT_NOTIFIER_NAME).lower()

    if backend == "log":
        logger.info("Using log notifier; no chat messages will be sent")
        return LogNotifier()

    if backend == "telegram":
        from .telegram import TelegramNotifier

        bot_token, chat_id = settings.require_telegram()
        logger.info("Using Telegram notifier for chat %s", chat_id)
        return TelegramNotifier(
            bot_token,
            chat_id,
            _session(settings, session),
            api_url=settings.telegram_api_url,
            timeout=settings.http_timeout_seconds,
        )

    raise ConfigError(f"Unknown notifier backend '{backend}'")
