"""Persisted monitor state.

Only the registry contents and the schedule cursors are persisted.  The
probe id index is derived and is rebuilt after every restore.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pyyarm.exceptions import YarmSnapshotError
from pyyarm.models.probe import ProbeRecord
from pyyarm.state.schedule import ScheduleState

SNAPSHOT_VERSION = 1


class MonitorSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = SNAPSHOT_VERSION
    records: list[ProbeRecord] = Field(default_factory=list)
    schedule: ScheduleState = Field(default_factory=ScheduleState)


def dump_snapshot(snapshot: MonitorSnapshot) -> str:
    return snapshot.model_dump_json()


def load_snapshot(text: str | bytes) -> MonitorSnapshot:
    """Parse a snapshot produced by :func:`dump_snapshot`.

    Raises
    ------
    YarmSnapshotError
        If *text* is not a valid snapshot of a supported version.
    """
    try:
        snapshot = MonitorSnapshot.model_validate_json(text)
    except ValidationError as err:
        raise YarmSnapshotError(f"invalid monitor snapshot: {err.error_count()} error(s)") from err
    if snapshot.version != SNAPSHOT_VERSION:
        raise YarmSnapshotError(f"unsupported snapshot version {snapshot.version}")
    return snapshot
