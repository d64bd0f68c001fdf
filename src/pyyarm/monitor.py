"""High-level resource monitor.

:class:`ResourceMonitor` is what a host simulation integrates with: it
registers probes as they're placed, forwards the host's cycle signal to
the refresh scheduler, and exposes the query and persistence surfaces.
"""

from __future__ import annotations

import logging
from typing import Any

from pyyarm.config import MonitorConfig
from pyyarm.ingestion.signals import ProbeId, SignalAdapter
from pyyarm.models.probe import Position, ProbeRecord
from pyyarm.state.registry import ProbeRegistry
from pyyarm.state.schedule import RefreshScheduler
from pyyarm.state.snapshot import MonitorSnapshot

_logger = logging.getLogger(__name__)


def _last_cycle(snapshot: MonitorSnapshot) -> int:
    cycles = [snapshot.schedule.cycle_window_start]
    for record in snapshot.records:
        cycles.append(record.created_at)
        cycles.extend(state.last_update for state in record.products.values())
    return max(cycles)


class ResourceMonitor:
    """Track probes and keep their depletion forecasts fresh.

    Parameters
    ----------
    adapter : SignalAdapter
        Source of per-probe readings.
    config : MonitorConfig or None
        Tuning constants.  Defaults to :class:`MonitorConfig` defaults.
    """

    def __init__(self, adapter: SignalAdapter, config: MonitorConfig | None = None) -> None:
        self._adapter = adapter
        self._config = config or MonitorConfig()
        self._registry = ProbeRegistry()
        self._scheduler = RefreshScheduler(self._registry, adapter, self._config)
        self._cycle = 0

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def registry(self) -> ProbeRegistry:
        return self._registry

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def cycle(self) -> int:
        """Last cycle seen by :meth:`on_cycle`."""
        return self._cycle

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(
        self,
        probe_id: ProbeId,
        coupling_handle: Any,
        *,
        owner: str | None = None,
        location_region: str | None = None,
        position: Position | tuple[float, float] | None = None,
        site_label: str = "",
    ) -> ProbeRecord:
        """Start tracking a newly placed probe.

        The probe is refreshed on the next cycle rather than waiting for
        its turn in the sweep.
        """
        if isinstance(position, tuple):
            position = Position(x=position[0], y=position[1])
        record = self._registry.add(
            probe_id,
            coupling_handle,
            created_at=self._cycle,
            owner=owner,
            location_region=location_region,
            position=position,
            site_label=site_label,
        )
        self._scheduler.request_refresh(record)
        return record

    def remove(self, record: ProbeRecord) -> None:
        self._registry.remove(record)

    def request_refresh(self, record: ProbeRecord) -> None:
        self._scheduler.request_refresh(record)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def lookup(self, probe_id: ProbeId) -> ProbeRecord | None:
        return self._registry.lookup(probe_id)

    def set_site_label(self, probe_id: ProbeId, label: str) -> bool:
        """Relabel a tracked probe.  Returns ``False`` if it isn't tracked."""
        record = self._registry.lookup(probe_id)
        if record is None:
            return False
        record.site_label = label
        return True

    def sites(self) -> dict[str, list[ProbeRecord]]:
        return self._registry.by_site()

    # ------------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------------

    def on_restart(self) -> None:
        self._registry.rebuild_index(self._adapter.is_valid)

    def on_cycle(self, now: int) -> int:
        """Handle one simulation cycle.  Returns the number of probes queried."""
        self._cycle = now
        return self._scheduler.tick(now)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> MonitorSnapshot:
        """Capture registry contents and schedule cursors."""
        return MonitorSnapshot(
            records=[record.model_copy(deep=True) for record in self._registry],
            schedule=self._scheduler.state(),
        )

    def restore(self, snapshot: MonitorSnapshot, *, now: int | None = None) -> None:
        """Replace all state with *snapshot* and rebuild the index.

        Without *now*, the current cycle is taken as the latest cycle the
        snapshot recorded (window start, record creation or product update).

        Raises
        ------
        YarmSnapshotError
            If the schedule references slots the snapshot has no record for.
        """
        registry = ProbeRegistry([record.model_copy(deep=True) for record in snapshot.records])
        scheduler = RefreshScheduler.from_state(registry, self._adapter, snapshot.schedule, self._config)
        self._registry = registry
        self._scheduler = scheduler
        self._cycle = now if now is not None else _last_cycle(snapshot)
        _logger.debug("Restored %d probe records", len(registry))
        self.on_restart()
