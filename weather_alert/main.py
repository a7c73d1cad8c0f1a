"""Wire the monitor together and drive it at the configured poll interval."""

from __future__ import annotations

import datetime as dt
import time
from typing import Callable, Optional

from weather_alert import config
from weather_alert.collaborators import (
    build_chart_source,
    build_notifier,
    build_session,
    build_weather_source,
)
from weather_alert.hysteresis import HysteresisAlertEvaluator
from weather_alert.monitor import MonitoringStateMachine
from weather_alert.schedule import ScheduleGate
from weather_alert.twilight import TwilightCalculator
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="main")


def build_state_machine(settings: config.Settings | None = None) -> MonitoringStateMachine:
    """Construct the state machine and its collaborators from settings (ConfigError if incomplete)."""
    settings = settings or config.settings
    session = build_session(retries=settings.http_retries)

    calculator = TwilightCalculator(settings.latitude, settings.longitude, settings.elevation)
    gate = ScheduleGate(calculator, lead_time=settings.lead_time)
    evaluator = HysteresisAlertEvaluator(
        settings.wind_threshold,
        settings.debounce,
        notify_routine_updates=settings.notify_routine_updates,
    )

    machine = MonitoringStateMachine(
        gate,
        build_weather_source(settings, session),
        build_chart_source(settings, session),
        build_notifier(settings, session),
        evaluator,
    )
    logger.info(
        "Monitor ready: threshold=%.1f m/s debounce=%s lead=%s poll=%s",
        settings.wind_threshold,
        settings.debounce,
        settings.lead_time,
        settings.poll_interval,
    )
    return machine


def run_forever(
    machine: MonitoringStateMachine,
    poll_interval: dt.timedelta,
    *,
    sleep: Callable[[float], None] = time.sleep,
    max_ticks: Optional[int] = None,
) -> int:
    """
    Tick `machine` every `poll_interval` until interrupted.

    `max_ticks` bounds the loop (used by tests and one-shot runs). Returns the
    number of ticks executed.
    """
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        try:
            machine.tick()
        except Exception:  # keep polling no matter what a tick raises
            logger.exception("Unexpected error during tick; continuing")
        ticks += 1
        if max_ticks is not None and ticks >= max_ticks:
            break
        sleep(poll_interval.total_seconds())
    return ticks
