"""Raise, hold, and clear the wind alert without flapping near the threshold.

Decision table (prior state, sample against threshold):

    Inactive, at/above       -> Active,   notify, hazardous
    Inactive, below          -> Inactive, notify (routine update)
    Active,   at/above       -> Active,   silent (already alerted)
    Active,   below, < quiet -> Active,   silent (snoozed)
    Active,   below, >= quiet-> Inactive, notify (cleared)

"quiet" is the debounce measured from the instant the alert was raised.
Later above-threshold samples do not restart it.
"""
from __future__ import annotations

import datetime as dt

from weather_alert.domain import AlertDecision, AlertState, AlertStatus, Observation
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="hysteresis")


def evaluate(
    sample: Observation,
    prior: AlertState,
    threshold: float,
    debounce: dt.timedelta,
    now: dt.datetime,
    *,
    notify_routine_updates: bool = True,
) -> AlertDecision:
    """Pure function: return the next alert state for one wind sample."""
    above = sample.wind_speed >= threshold

    if not prior.is_active:
        if above:
            raised = AlertState(status=AlertStatus.ACTIVE, last_transition_at=now)
            return AlertDecision(next_state=raised, must_notify=True, hazardous=True)
        return AlertDecision(next_state=prior, must_notify=notify_routine_updates, hazardous=False)

    if above:
        return AlertDecision(next_state=prior, must_notify=False, hazardous=True)

    raised_at = prior.last_transition_at
    # Active states carry their raise time; without one the debounce counts as elapsed.
    if raised_at is not None and now - raised_at < debounce:
        return AlertDecision(next_state=prior, must_notify=False, hazardous=True)

    cleared = AlertState(status=AlertStatus.INACTIVE, last_transition_at=now)
    return AlertDecision(next_state=cleared, must_notify=True, hazardous=False)


class HysteresisAlertEvaluator:
    """`evaluate` bound to the configured threshold, debounce, and routine-update policy."""

    def __init__(
        self,
        threshold: float,
        debounce: dt.timedelta,
        *,
        notify_routine_updates: bool = True,
    ) -> None:
        if debounce < dt.timedelta(0):
            raise ValueError(f"debounce must not be negative, got {debounce}")
        self.threshold = threshold
        self.debounce = debounce
        self.notify_routine_updates = notify_routine_updates

    def decide(self, sample: Observation, prior: AlertState, now: dt.datetime) -> AlertDecision:
        decision = evaluate(
            sample,
            prior,
            self.threshold,
            self.debounce,
            now,
            notify_routine_updates=self.notify_routine_updates,
        )
        if decision.next_state.status is not prior.status:
            logger.info(
                "Wind alert %s -> %s (wind=%.1f, threshold=%.1f)",
                prior.status.value,
                decision.next_state.status.value,
                sample.wind_speed,
                self.threshold,
            )
        elif prior.is_active and not decision.must_notify and sample.wind_speed < self.threshold:
            logger.info(
                "Wind %.1f below threshold %.1f but debounce %s has not elapsed; alert held",
                sample.wind_speed,
                self.threshold,
                self.debounce,
            )
        return decision
