"""
Nightly monitoring state machine.

`MonitoringStateMachine.tick()` is called once per poll interval. It checks
the schedule first, then, depending on the current state:

    Off, work time starts  -> notify work_started(window), switch On, then
                              check the weather as below
    Off, still day         -> nothing
    On,  work time ends    -> notify work_ended(), reset alert, switch Off
    On,  still night       -> fetch observation + chart, run the hysteresis
                              evaluator, notify update(...) when required

A tick either completes and commits its new state, or fails on a
collaborator/schedule error and leaves every field untouched; the next
tick retries from the same state. The one exception is a failed
work_ended() notice: monitoring still switches Off and the alert is still
reset, so no alert outlives its night.
"""

from __future__ import annotations

import datetime as dt
import threading
from typing import Callable, Optional, Tuple

from weather_alert.collaborators.base import ChartSource, Notifier, WeatherSource
from weather_alert.domain import AlertState, MonitoringState
from weather_alert.errors import CollaboratorError, DeliveryError, ScheduleError
from weather_alert.hysteresis import HysteresisAlertEvaluator
from weather_alert.schedule import ScheduleGate
from weather_alert.twilight import as_utc
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="monitor")

Clock = Callable[[], dt.datetime]


def utc_now() -> dt.datetime:
    """Default clock."""
    return dt.datetime.now(dt.timezone.utc)


class MonitoringStateMachine:
    """
    Owns all mutable monitoring state for the process.

    Parameters
    ----------
    gate : ScheduleGate
        Decides whether an instant is inside the work window.
    weather : WeatherSource
        Provides the latest observation.
    charts : ChartSource
        Provides the chart attached to updates.
    notifier : Notifier
        Receives lifecycle events and updates.
    evaluator : HysteresisAlertEvaluator
        Turns a sample plus the prior alert state into a decision.
    clock : callable, optional
        Returns the current aware datetime; used when `tick()` gets no `now`.
    """

    def __init__(
        self,
        gate: ScheduleGate,
        weather: WeatherSource,
        charts: ChartSource,
        notifier: Notifier,
        evaluator: HysteresisAlertEvaluator,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self._gate = gate
        self._weather = weather
        self._charts = charts
        self._notifier = notifier
        self._evaluator = evaluator
        self._clock = clock or utc_now

        self._state = MonitoringState.OFF
        self._alert = AlertState.inactive()
        # ticks never overlap
        self._lock = threading.Lock()

    @property
    def state(self) -> MonitoringState:
        return self._state

    @property
    def alert_state(self) -> AlertState:
        return self._alert

    def snapshot(self) -> Tuple[MonitoringState, AlertState]:
        """Return (monitoring state, alert state) as one consistent pair."""
        with self._lock:
            return self._state, self._alert

    def tick(self, now: Optional[dt.datetime] = None) -> MonitoringState:
        """Run one poll cycle and return the monitoring state after it."""
        with self._lock:
            now = as_utc(now) if now is not None else as_utc(self._clock())
            try:
                self._step(now)
            except ScheduleError as exc:
                logger.error("Schedule check failed, retrying next tick: %s", exc)
            except CollaboratorError as exc:
                logger.warning(
                    "Tick abandoned in state %s after %s: %s",
                    self._state.value,
                    type(exc).__name__,
                    exc,
                )
            return self._state

    def _step(self, now: dt.datetime) -> None:
        work_time = self._gate.is_work_time(now)

        if self._state is MonitoringState.OFF:
            if not work_time:
                return
            self._start(now)

        if not work_time:
            self._stop()
            return

        self._check_weather(now)

    def _start(self, now: dt.datetime) -> None:
        window = self._gate.window_for(now)
        self._notifier.work_started(window)
        self._state = MonitoringState.ON
        self._alert = AlertState.inactive()
        logger.info(
            "Work window started: dusk=%s dawn=%s",
            window.dusk.isoformat(),
            window.dawn.isoformat(),
        )

    def _stop(self) -> None:
        try:
            self._notifier.work_ended()
        except DeliveryError as exc:
            logger.warning("Work-ended notice not delivered: %s", exc)
        self._state = MonitoringState.OFF
        self._alert = AlertState.inactive()
        logger.info("Work window ended")

    def _check_weather(self, now: dt.datetime) -> None:
        observation = self._weather.get_latest()
        chart = self._charts.get_updated_chart()

        decision = self._evaluator.decide(observation, self._alert, now)
        logger.debug(
            "wind=%.1f temperature=%.1f observed_at=%s -> %s notify=%s",
            observation.wind_speed,
            observation.temperature,
            observation.observed_at.isoformat(),
            decision.next_state.status.value,
            decision.must_notify,
        )

        if decision.must_notify:
            self._notifier.update(chart, observation, decision.hazardous)
        self._alert = decision.next_state
