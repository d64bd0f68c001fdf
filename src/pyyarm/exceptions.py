"""Custom exception hierarchy for pyyarm."""

from __future__ import annotations


class YarmError(Exception):
    """Base exception for all pyyarm errors."""


class YarmConfigError(YarmError):
    """Invalid or missing configuration."""


class YarmSignalError(YarmError):
    """A signal adapter failed to produce readings for a probe.

    Adapters may raise this from ``get_readings``.  The refresh scheduler
    logs it and skips the probe for the current cycle; it never stops the
    rest of the population from refreshing.
    """

    def __init__(self, message: str, *, probe_id: int | str | None = None) -> None:
        self.probe_id = probe_id
        super().__init__(message)


class YarmSnapshotError(YarmError):
    """A persisted snapshot could not be parsed or is inconsistent."""
