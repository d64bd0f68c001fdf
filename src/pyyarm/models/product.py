"""Product readings and per-product depletion state."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pyyarm.ingestion.normalize import safe_float


class Reading(BaseModel):
    """A point-in-time count for one product, as reported by a probe."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    count: float

    @field_validator("count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None or not math.isfinite(parsed):
            raise ValueError(f"count must be a finite number, got {value!r}")
        return parsed


class ProductState(BaseModel):
    """Depletion state of one product tracked by one probe.

    Parameters
    ----------
    amount : float
        Last observed quantity.
    initial_amount : float
        Quantity at first observation.
    last_update : int
        Cycle at which ``amount`` was last set.
    delta_per_minute : float
        Smoothed rate of change.  Positive means depleting; zero or
        negative means stable or growing.
    minutes_to_deplete : float or None
        Exhaustion forecast.  ``None`` means "never" and is used exactly
        when ``delta_per_minute <= 0``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: float
    initial_amount: float
    last_update: int
    delta_per_minute: float = 0.0
    minutes_to_deplete: float | None = None

    @model_validator(mode="after")
    def _check_forecast(self) -> ProductState:
        if (self.minutes_to_deplete is None) != (self.delta_per_minute <= 0):
            raise ValueError("minutes_to_deplete must be None exactly when delta_per_minute <= 0")
        return self

    @property
    def is_depleting(self) -> bool:
        return self.minutes_to_deplete is not None

    @property
    def depleted_fraction(self) -> float:
        """Share of ``initial_amount`` already consumed (``0.0`` when unknown)."""
        if self.initial_amount <= 0:
            return 0.0
        return (self.initial_amount - self.amount) / self.initial_amount
