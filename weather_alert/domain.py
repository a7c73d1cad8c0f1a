"""Value types shared by the monitor core and its collaborators.

Every model here is frozen; the state machine replaces values rather than
mutating them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class _FrozenModel(BaseModel):
    """Immutable model with strict extra handling."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class MonitoringState(str, Enum):
    """Whether the current instant is inside the nightly work window."""
    OFF = "off"
    ON = "on"


class AlertStatus(str, Enum):
    """Whether a wind hazard alert is currently raised."""
    INACTIVE = "inactive"
    ACTIVE = "active"


class Observation(_FrozenModel):
    """One parsed sample from the meteo feed (wind in m/s, temperature in deg C)."""
    wind_speed: float
    temperature: float
    observed_at: datetime


class Chart(_FrozenModel):
    """Reference to a locally downloaded rendering of current conditions."""
    path: str
    created_at: datetime


class TwilightWindow(_FrozenModel):
    """Nautical dusk of one evening and nautical dawn of the next morning."""
    dusk: datetime
    dawn: datetime

    @model_validator(mode="after")
    def _dusk_before_dawn(self) -> "TwilightWindow":
        if self.dusk >= self.dawn:
            raise ValueError(f"dusk {self.dusk.isoformat()} is not before dawn {self.dawn.isoformat()}")
        return self


class AlertState(_FrozenModel):
    """Alert status plus the instant of its most recent change."""
    status: AlertStatus = AlertStatus.INACTIVE
    last_transition_at: Optional[datetime] = None

    @classmethod
    def inactive(cls) -> "AlertState":
        """Fresh state used at startup and whenever monitoring switches on or off."""
        return cls()

    @property
    def is_active(self) -> bool:
        return self.status is AlertStatus.ACTIVE


class AlertDecision(_FrozenModel):
    """Outcome of evaluating one sample against the prior alert state."""
    next_state: AlertState
    must_notify: bool
    hazardous: bool
