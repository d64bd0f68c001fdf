"""Signal adapter boundary and reading merge helpers.

The host simulation owns the probes; pyyarm only asks it, through a
:class:`SignalAdapter`, for the current per-product counts of a probe.
Everything an adapter returns is funnelled through :func:`coerce_report`
so the scheduler only ever sees a :class:`SignalReport`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyyarm._constants import product_key
from pyyarm.ingestion.normalize import safe_float, safe_str
from pyyarm.models.product import ProductState, Reading

ProbeId = int | str


class SignalReport(BaseModel):
    """Result of querying a probe's signals.

    Parameters
    ----------
    valid : bool
        ``False`` when the probe no longer exists in the host world.
        Readings must be ignored in that case.
    readings : dict
        Product key -> :class:`Reading`.  Bare numbers are accepted as
        shorthand for ``{"count": n}``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    valid: bool = True
    readings: dict[str, Reading] = Field(default_factory=dict)

    @field_validator("readings", mode="before")
    @classmethod
    def _wrap_bare_counts(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        return {key: {"count": v} if not isinstance(v, (Mapping, Reading)) else v for key, v in value.items()}


class SignalAdapter(Protocol):
    """Source of per-probe readings, implemented by the host integration."""

    def get_readings(self, probe_id: ProbeId) -> SignalReport | tuple[bool, Mapping[str, Any]]: ...

    def is_valid(self, probe_id: ProbeId) -> bool: ...


def coerce_report(result: Any) -> SignalReport:
    """Normalize whatever an adapter returned into a :class:`SignalReport`.

    Accepts a report, a ``(validity, readings)`` tuple, or a bare readings
    mapping (implicitly valid).
    """
    if isinstance(result, SignalReport):
        return result
    if isinstance(result, tuple):
        valid, readings = result
        if not valid:
            return SignalReport(valid=False)
        return SignalReport(valid=True, readings=dict(readings or {}))
    if isinstance(result, Mapping):
        return SignalReport(valid=True, readings=dict(result))
    raise TypeError(f"unsupported signal adapter result: {type(result).__name__}")


def readings_from_signals(signals: Iterable[Mapping[str, Any]] | None) -> dict[str, Reading]:
    """Convert a host's merged circuit-signal list into product readings.

    Each entry looks like ``{"signal": {"type": "item", "name": "iron-ore"},
    "count": 1200}``.  Zero counts are dropped because hosts never report
    them; duplicate keys are summed.
    """
    totals: dict[str, float] = {}
    for entry in signals or ():
        signal = entry.get("signal") or {}
        signal_type = safe_str(signal.get("type"))
        name = safe_str(signal.get("name"))
        count = safe_float(entry.get("count"))
        if signal_type is None or name is None or count is None:
            continue
        key = product_key(signal_type, name)
        totals[key] = totals.get(key, 0.0) + count
    return {key: Reading(count=count) for key, count in totals.items() if count != 0}


def merge_readings(
    products: Mapping[str, ProductState],
    readings: Mapping[str, Reading],
) -> dict[str, tuple[ProductState | None, Reading | None]]:
    """Pair every known product with its reading, and every reading with its product.

    Products missing from *readings* get ``None`` so they are still
    advanced (as a zero count) instead of freezing at their last amount.
    """
    composite: dict[str, tuple[ProductState | None, Reading | None]] = {
        key: (state, readings.get(key)) for key, state in products.items()
    }
    for key, reading in readings.items():
        if key not in composite:
            composite[key] = (None, reading)
    return composite
