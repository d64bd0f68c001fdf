"""Append-only probe registry.

Records are never removed while the process runs; removal only clears
``alive``.  That keeps every record's slot stable, so the probe id index
and the scheduler's cursor never need to be patched up.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from pyyarm.ingestion.signals import ProbeId
from pyyarm.models.probe import Position, ProbeRecord

_logger = logging.getLogger(__name__)


class ProbeRegistry:
    """Authoritative list of every probe ever tracked, plus a lookup index."""

    def __init__(self, records: list[ProbeRecord] | None = None) -> None:
        self._records: list[ProbeRecord] = []
        self._index: dict[ProbeId, int] = {}
        for record in records or ():
            record.slot = len(self._records)
            self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProbeRecord]:
        return iter(self._records)

    def __getitem__(self, slot: int) -> ProbeRecord:
        return self._records[slot]

    @property
    def index(self) -> dict[ProbeId, int]:
        """Copy of the probe id -> slot index."""
        return dict(self._index)

    def add(
        self,
        probe_id: ProbeId,
        coupling_handle: Any,
        *,
        created_at: int = 0,
        owner: str | None = None,
        location_region: str | None = None,
        position: Position | None = None,
        site_label: str = "",
    ) -> ProbeRecord:
        """Create a record for a newly placed probe and append it.

        A probe id that is already tracked and alive keeps its record; that
        record is returned unchanged.
        """
        existing = self.lookup(probe_id)
        if existing is not None and existing.alive:
            _logger.warning("Probe %s is already tracked at slot %d", probe_id, existing.slot)
            return existing

        record = ProbeRecord(
            probe_id=probe_id,
            coupling_handle=coupling_handle,
            created_at=created_at,
            owner=owner,
            location_region=location_region,
            position=position,
            site_label=site_label,
            slot=len(self._records),
        )
        self._records.append(record)
        self._index[probe_id] = record.slot
        _logger.debug("Registered probe %s at slot %d", probe_id, record.slot)
        return record

    def remove(self, record: ProbeRecord) -> None:
        """Soft-delete *record*; its slot stays occupied."""
        record.alive = False
        if self._index.get(record.probe_id) == record.slot:
            del self._index[record.probe_id]
        _logger.debug("Removed probe %s (slot %d)", record.probe_id, record.slot)

    def lookup(self, probe_id: ProbeId) -> ProbeRecord | None:
        slot = self._index.get(probe_id)
        if slot is None or slot >= len(self._records):
            return None
        record = self._records[slot]
        if record.probe_id != probe_id:
            return None
        return record

    def rebuild_index(self, is_valid: Callable[[ProbeId], bool] | None = None) -> None:
        """Recreate the index with a full scan.

        Dead records, and records whose probe fails *is_valid*, are left
        out; the next refresh of the latter marks them dead.
        """
        index: dict[ProbeId, int] = {}
        for record in self._records:
            if not record.alive:
                continue
            if is_valid is not None and not is_valid(record.probe_id):
                continue
            index[record.probe_id] = record.slot
        self._index = index
        _logger.debug("Rebuilt probe index: %d of %d records indexed", len(index), len(self._records))

    def live_records(self) -> list[ProbeRecord]:
        return [record for record in self._records if record.alive]

    def by_site(self) -> dict[str, list[ProbeRecord]]:
        """Group live records by ``site_label``."""
        sites: dict[str, list[ProbeRecord]] = {}
        for record in self._records:
            if record.alive:
                sites.setdefault(record.site_label, []).append(record)
        return sites
