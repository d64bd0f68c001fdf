"""Amortized round-robin refresh scheduling.

Two cooperating cursors decide what gets refreshed on each cycle:

* a FIFO priority queue of records that must be refreshed on the very
  next cycle (newly added or flagged stale), drained completely;
* a persistent wrap-around cursor that sweeps the registry so that one
  full pass completes per sweep window, spreading the work evenly over
  the window's cycles.

Once the window's pass is complete the sweep pauses until the next
window begins.
"""

from __future__ import annotations

import logging
import math
from collections import deque

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from pyyarm.config import MonitorConfig
from pyyarm.exceptions import YarmSignalError, YarmSnapshotError
from pyyarm.ingestion.signals import SignalAdapter, coerce_report, merge_readings
from pyyarm.models.probe import ProbeRecord
from pyyarm.state.forecast import advance
from pyyarm.state.registry import ProbeRegistry

_logger = logging.getLogger(__name__)


class ScheduleState(BaseModel):
    """Persistable form of the scheduler's cursors.

    Parameters
    ----------
    priority_queue : list[int]
        Slots of records awaiting a forced refresh, in order.
    cursor : int or None
        Slot the sweep visited last; ``None`` before the first visit.
    cycle_window_start : int
        Cycle at which the current sweep window began.
    swept : int
        Slots visited by the sweep since the window began.
    """

    model_config = ConfigDict(extra="forbid")

    priority_queue: list[NonNegativeInt] = Field(default_factory=list)
    cursor: int | None = Field(default=None, ge=0)
    cycle_window_start: int = 0
    swept: int = Field(default=0, ge=0)


class RefreshScheduler:
    """Drive probe refreshes with a bounded amount of work per cycle."""

    def __init__(
        self,
        registry: ProbeRegistry,
        adapter: SignalAdapter,
        config: MonitorConfig | None = None,
    ) -> None:
        self._registry = registry
        self._adapter = adapter
        self._config = config or MonitorConfig()
        self._priority: deque[ProbeRecord] = deque()
        self._queued: set[int] = set()
        self._cursor: int | None = None
        self._cycle_window_start = 0
        self._swept = 0

    @classmethod
    def from_state(
        cls,
        registry: ProbeRegistry,
        adapter: SignalAdapter,
        state: ScheduleState,
        config: MonitorConfig | None = None,
    ) -> RefreshScheduler:
        """Resume a scheduler from persisted cursors.

        Raises
        ------
        YarmSnapshotError
            If *state* references a slot the registry doesn't have.
        """
        size = len(registry)
        for slot in state.priority_queue:
            if slot >= size:
                raise YarmSnapshotError(f"priority queue references unknown slot {slot} (registry has {size})")
        if state.cursor is not None and state.cursor >= size:
            raise YarmSnapshotError(f"cursor references unknown slot {state.cursor} (registry has {size})")

        scheduler = cls(registry, adapter, config)
        for slot in state.priority_queue:
            scheduler.request_refresh(registry[slot])
        scheduler._cursor = state.cursor
        scheduler._cycle_window_start = state.cycle_window_start
        scheduler._swept = min(state.swept, size)
        return scheduler

    def state(self) -> ScheduleState:
        return ScheduleState(
            priority_queue=[record.slot for record in self._priority],
            cursor=self._cursor,
            cycle_window_start=self._cycle_window_start,
            swept=self._swept,
        )

    @property
    def priority_queue(self) -> list[ProbeRecord]:
        return list(self._priority)

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def cycle_window_start(self) -> int:
        return self._cycle_window_start

    def request_refresh(self, record: ProbeRecord) -> None:
        """Refresh *record* on the next cycle, ahead of the sweep."""
        if record.slot in self._queued:
            return
        self._queued.add(record.slot)
        self._priority.append(record)

    def tick(self, now: int) -> int:
        """Run one cycle of refreshes.

        Returns the number of live records visited for refresh (priority and sweep).
        """
        visited: set[int] = set()
        queried = 0
        while self._priority:
            record = self._priority.popleft()
            self._queued.discard(record.slot)
            if record.slot in visited or not record.alive:
                continue
            visited.add(record.slot)
            self.refresh(record, now)
            queried += 1

        window = self._config.sweep_window
        elapsed = now - self._cycle_window_start
        if elapsed < 0 or elapsed >= window:
            self._start_window(now)
            elapsed = 0

        size = len(self._registry)
        pending = size - self._swept
        if size == 0 or pending <= 0:
            return queried

        remaining_cycles = max(1, window - elapsed)
        budget = math.ceil(pending / remaining_cycles)

        spent = 0
        steps = 0
        while spent < budget and steps < size and self._swept < size:
            slot = 0 if self._cursor is None else (self._cursor + 1) % size
            self._cursor = slot
            self._swept += 1
            steps += 1

            record = self._registry[slot]
            if not record.alive or slot in visited:
                continue
            visited.add(slot)
            self.refresh(record, now)
            spent += 1

        if self._swept >= size:
            _logger.debug("Sweep complete at cycle %d (%d slots)", now, size)
        return queried + spent

    def refresh(self, record: ProbeRecord, now: int) -> bool:
        """Pull fresh readings for *record* and advance its products.

        Returns ``True`` if the record's products were updated.
        """
        if not record.alive:
            return False

        try:
            report = coerce_report(self._adapter.get_readings(record.probe_id))
        except YarmSignalError as err:
            _logger.warning("Reading signals failed for probe %s: %s", record.probe_id, err)
            return False
        except Exception:
            _logger.warning("Unexpected error reading probe %s; skipping", record.probe_id, exc_info=True)
            return False

        if not report.valid:
            _logger.info("Probe %s is no longer valid; marking it dead", record.probe_id)
            self._registry.remove(record)
            return False

        for key, (state, reading) in merge_readings(record.products, report.readings).items():
            record.products[key] = advance(
                state,
                reading,
                now,
                ticks_per_minute=self._config.ticks_per_minute,
                smoothing_factor=self._config.smoothing_factor,
            )
        return True

    def _start_window(self, now: int) -> None:
        _logger.debug("Starting sweep window at cycle %d", now)
        self._cycle_window_start = now
        self._swept = 0
