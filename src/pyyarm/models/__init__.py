"""Data models for probes and their tracked products."""

from pyyarm.models.probe import Position, ProbeRecord
from pyyarm.models.product import ProductState, Reading

__all__ = [
    "Position",
    "ProbeRecord",
    "ProductState",
    "Reading",
]
