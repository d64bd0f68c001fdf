"""Depletion forecast model.

Pure functions: given the previous state of a product and a new reading,
compute the next state.  No I/O, no clock; the caller supplies ``now``.
"""

from __future__ import annotations

from pyyarm._constants import DEFAULT_SMOOTHING_FACTOR, TICKS_PER_MINUTE
from pyyarm.models.product import ProductState, Reading

_ZERO_READING = Reading(count=0)


def linear_ease(current: float, target: float, fraction: float) -> float:
    """Move *current* towards *target* by *fraction* of the gap."""
    return current + fraction * (target - current)


def advance(
    previous: ProductState | None,
    reading: Reading | None,
    now: int,
    *,
    ticks_per_minute: int = TICKS_PER_MINUTE,
    smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR,
) -> ProductState:
    """Return the state of a product after observing *reading* at cycle *now*.

    - No previous state: the reading starts a fresh state with no rate.
    - No reading: the product stopped reporting and is treated as a count
      of zero, so it drains instead of freezing at its last amount.
    - No cycles elapsed (or the clock went backwards): *previous* is
      returned unchanged.
    """
    if previous is None:
        if reading is None:
            raise ValueError("advance() needs a previous state or a reading")
        return ProductState(
            amount=reading.count,
            initial_amount=reading.count,
            last_update=now,
        )

    if reading is None:
        reading = _ZERO_READING

    elapsed = now - previous.last_update
    if elapsed <= 0:
        return previous

    instant_rate = (previous.amount - reading.count) * (ticks_per_minute / elapsed)
    rate = linear_ease(previous.delta_per_minute, instant_rate, smoothing_factor)

    # Count either grew or didn't change: no exhaustion forecast.
    minutes_to_deplete = reading.count / rate if rate > 0 else None

    return previous.model_copy(
        update={
            "amount": reading.count,
            "last_update": now,
            "delta_per_minute": rate,
            "minutes_to_deplete": minutes_to_deplete,
        }
    )
