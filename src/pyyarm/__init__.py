"""pyyarm - Resource depletion monitoring for simulated worlds."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyyarm")
except PackageNotFoundError:
    __version__ = "0+local"
from pyyarm._constants import product_key
from pyyarm.config import MonitorConfig
from pyyarm.exceptions import YarmConfigError, YarmError, YarmSignalError, YarmSnapshotError
from pyyarm.ingestion.signals import SignalAdapter, SignalReport, coerce_report, readings_from_signals
from pyyarm.models import Position, ProbeRecord, ProductState, Reading
from pyyarm.monitor import ResourceMonitor
from pyyarm.state.forecast import advance
from pyyarm.state.registry import ProbeRegistry
from pyyarm.state.schedule import RefreshScheduler, ScheduleState
from pyyarm.state.snapshot import MonitorSnapshot, dump_snapshot, load_snapshot

__all__ = [
    "__version__",
    "MonitorConfig",
    "MonitorSnapshot",
    "Position",
    "ProbeRecord",
    "ProbeRegistry",
    "ProductState",
    "Reading",
    "RefreshScheduler",
    "ResourceMonitor",
    "ScheduleState",
    "SignalAdapter",
    "SignalReport",
    "YarmConfigError",
    "YarmError",
    "YarmSignalError",
    "YarmSnapshotError",
    "advance",
    "coerce_report",
    "dump_snapshot",
    "load_snapshot",
    "product_key",
    "readings_from_signals",
]
