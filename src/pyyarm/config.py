"""Monitor configuration for pyyarm."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any

from pyyarm._constants import DEFAULT_SMOOTHING_FACTOR, DEFAULT_SWEEP_WINDOW, TICKS_PER_MINUTE
from pyyarm.exceptions import YarmConfigError


def _env_number(env_key: str, value: str, cast: Callable[[str], Any]) -> Any:
    try:
        return cast(value.strip())
    except ValueError as err:
        raise YarmConfigError(f"{env_key} must be numeric, got {value!r}") from err


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Monitor configuration.

    Parameters
    ----------
    ticks_per_minute : int
        Simulation cycles per minute.  Converts cycle deltas into the
        per-minute depletion rate.
    sweep_window : int
        Number of cycles over which the refresh scheduler completes one
        full pass of the registry.
    smoothing_factor : float
        Exponential smoothing weight in ``(0, 1]`` applied to each new
        instantaneous rate.  ``1`` disables smoothing.
    """

    ticks_per_minute: int = TICKS_PER_MINUTE
    sweep_window: int = DEFAULT_SWEEP_WINDOW
    smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR

    def __post_init__(self) -> None:
        if self.ticks_per_minute <= 0:
            raise YarmConfigError(f"ticks_per_minute must be positive, got {self.ticks_per_minute}")
        if self.sweep_window <= 0:
            raise YarmConfigError(f"sweep_window must be positive, got {self.sweep_window}")
        if not 0 < self.smoothing_factor <= 1:
            raise YarmConfigError(f"smoothing_factor must be in (0, 1], got {self.smoothing_factor}")

    @classmethod
    def from_env(cls, **overrides: Any) -> MonitorConfig:
        """Create configuration from environment variables.

        Reads ``YARM_TICKS_PER_MINUTE``, ``YARM_SWEEP_WINDOW`` and
        ``YARM_SMOOTHING_FACTOR``.  Explicit keyword arguments override
        environment values.

        Raises
        ------
        YarmConfigError
            If a variable is not numeric or a value is out of range.
        """
        env = os.environ

        _ENV_CONFIG_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "YARM_TICKS_PER_MINUTE": ("ticks_per_minute", int),
            "YARM_SWEEP_WINDOW": ("sweep_window", int),
            "YARM_SMOOTHING_FACTOR": ("smoothing_factor", float),
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, (field_name, cast) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
