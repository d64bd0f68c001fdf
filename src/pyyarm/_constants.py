"""Internal constants shared across the library."""

#: Simulation cycles per real-world minute (60 cycles/s).
TICKS_PER_MINUTE = 3600

#: Cycles over which one full registry sweep completes.  Resource signals
#: don't change more often than this, so refreshing faster is wasted work.
DEFAULT_SWEEP_WINDOW = 300

#: Fraction of the gap between the smoothed and the instantaneous rate
#: closed on every update.
DEFAULT_SMOOTHING_FACTOR = 0.25

# ------------------------------------------------------------------
# Product keys  ("<locale group>.<signal name>")
# ------------------------------------------------------------------

_LOCALE_GROUPS: dict[str, str] = {
    "item": "item-name",
    "fluid": "fluid-name",
    "virtual": "virtual-signal-name",
}


def locale_group_from_signal_type(signal_type: str) -> str:
    """Map a circuit signal type to its locale group.

    Raises :class:`ValueError` for unknown signal types.
    """
    group = _LOCALE_GROUPS.get(signal_type)
    if group is None:
        raise ValueError(f"signal type must be one of {tuple(_LOCALE_GROUPS)}, got {signal_type!r}")
    return group


def product_key(signal_type: str, name: str) -> str:
    """Build the product key used to index a probe's products."""
    return f"{locale_group_from_signal_type(signal_type)}.{name}"
