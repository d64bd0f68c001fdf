"""Ingestion layer.

This package holds the boundary to the host simulation's signal sources:
the adapter protocol, and helpers that turn raw circuit signals into
normalized product readings.
"""

__all__: list[str] = []
