from __future__ import annotations

import pytest

from pyyarm.config import MonitorConfig
from pyyarm.exceptions import YarmConfigError


def test_defaults() -> None:
    config = MonitorConfig()

    assert config.ticks_per_minute == 3600
    assert config.sweep_window == 300
    assert config.smoothing_factor == 0.25


def test_from_env_reads_yarm_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YARM_TICKS_PER_MINUTE", "1800")
    monkeypatch.setenv("YARM_SWEEP_WINDOW", " 600 ")
    monkeypatch.setenv("YARM_SMOOTHING_FACTOR", "0.5")

    config = MonitorConfig.from_env()

    assert config.ticks_per_minute == 1800
    assert config.sweep_window == 600
    assert config.smoothing_factor == 0.5


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YARM_SWEEP_WINDOW", "not-a-number")

    config = MonitorConfig.from_env(sweep_window=60)

    assert config.sweep_window == 60


def test_from_env_rejects_non_numeric(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YARM_SMOOTHING_FACTOR", "fast")

    with pytest.raises(YarmConfigError):
        MonitorConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ticks_per_minute": 0},
        {"sweep_window": -1},
        {"smoothing_factor": 0.0},
        {"smoothing_factor": 1.5},
    ],
)
def test_rejects_out_of_range_values(kwargs: dict[str, float]) -> None:
    with pytest.raises(YarmConfigError):
        MonitorConfig(**kwargs)  # type: ignore[arg-type]
