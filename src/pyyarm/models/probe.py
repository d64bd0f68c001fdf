"""Probe record model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyyarm.models.product import ProductState


class Position(BaseModel):
    """World position of a probe, snapshotted when it was placed."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class ProbeRecord(BaseModel):
    """Everything tracked about one probe.

    Parameters
    ----------
    probe_id : int or str
        Stable identity of the probe in the host world.
    coupling_handle : Any
        Opaque reference to the auxiliary entity that enables signal
        extraction.  Only held, never inspected.  Must be JSON
        serializable for snapshots.
    created_at : int
        Cycle at which the probe was registered.
    owner, location_region, position
        Placement metadata for display/grouping.  Never mutated here.
    site_label : str
        Free-form grouping label, editable by display collaborators.
    products : dict
        Product key -> :class:`ProductState`.  Written only by the
        refresh scheduler.
    alive : bool
        Soft-delete flag.  Dead records stay in the registry so slots
        of other records never shift.
    slot : int
        Position of the record in the registry.  Assigned once.
    """

    model_config = ConfigDict(extra="forbid")

    probe_id: int | str
    coupling_handle: Any = None
    created_at: int = 0
    owner: str | None = None
    location_region: str | None = None
    position: Position | None = None
    site_label: str = ""
    products: dict[str, ProductState] = Field(default_factory=dict)
    alive: bool = True
    slot: int = Field(default=0, ge=0)
