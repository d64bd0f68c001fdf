from __future__ import annotations

import logging

import pytest

from pyyarm.models.probe import Position, ProbeRecord
from pyyarm.state.registry import ProbeRegistry


def _registry(*probe_ids: int) -> ProbeRegistry:
    registry = ProbeRegistry()
    for probe_id in probe_ids:
        registry.add(probe_id, f"pole-{probe_id}")
    return registry


def test_add_appends_and_indexes() -> None:
    registry = ProbeRegistry()

    first = registry.add(
        10,
        "pole-10",
        created_at=5,
        owner="player",
        location_region="nauvis",
        position=Position(x=1, y=2),
    )
    second = registry.add(11, "pole-11")

    assert len(registry) == 2
    assert (first.slot, second.slot) == (0, 1)
    assert registry.index == {10: 0, 11: 1}
    assert first.created_at == 5
    assert first.owner == "player"
    assert first.position == Position(x=1, y=2)
    assert first.products == {}
    assert first.alive
    assert registry[1] is second


def test_lookup() -> None:
    registry = _registry(1, 2)

    assert registry.lookup(2) is registry[1]
    assert registry.lookup(99) is None


def test_remove_is_soft_delete() -> None:
    registry = _registry(1, 2, 3)
    record = registry[1]

    registry.remove(record)

    assert not record.alive
    assert len(registry) == 3
    assert registry[1] is record
    assert registry.lookup(2) is None
    assert registry.lookup(1) is registry[0]
    assert registry.lookup(3) is registry[2]
    assert [r.probe_id for r in registry.live_records()] == [1, 3]


def test_readding_removed_probe_gets_new_slot() -> None:
    registry = _registry(1)
    registry.remove(registry[0])

    record = registry.add(1, "pole-1b")

    assert record.slot == 1
    assert registry.lookup(1) is record


def test_rebuild_index_skips_invalid_and_dead() -> None:
    registry = _registry(1, 2, 3, 4)
    registry.remove(registry[3])

    registry.rebuild_index(lambda probe_id: probe_id != 2)

    assert registry.index == {1: 0, 3: 2}
    assert registry.lookup(2) is None


def test_rebuild_index_is_idempotent() -> None:
    registry = _registry(1, 2, 3)

    def is_valid(probe_id: int | str) -> bool:
        return probe_id != 3

    registry.rebuild_index(is_valid)
    once = registry.index
    registry.rebuild_index(is_valid)

    assert registry.index == once == {1: 0, 2: 1}


def test_constructor_reassigns_slots() -> None:
    records = [ProbeRecord(probe_id="a", slot=7), ProbeRecord(probe_id="b", slot=7)]

    registry = ProbeRegistry(records)

    assert [record.slot for record in registry] == [0, 1]
    assert registry.lookup("a") is None
    registry.rebuild_index()
    assert registry.lookup("b") is records[1]


def test_by_site_groups_live_records() -> None:
    registry = _registry(1, 2, 3)
    registry[0].site_label = "north"
    registry[1].site_label = "north"
    registry.remove(registry[1])

    sites = registry.by_site()

    assert [r.probe_id for r in sites["north"]] == [1]
    assert [r.probe_id for r in sites[""]] == [3]


def test_adding_live_probe_again_returns_existing_record(caplog: pytest.LogCaptureFixture) -> None:
    registry = _registry(1)

    with caplog.at_level(logging.WARNING, logger="pyyarm.state.registry"):
        again = registry.add(1, "pole-other")

    assert again is registry[0]
    assert again.coupling_handle == "pole-1"
    assert len(registry) == 1
    assert registry.lookup(1) is again
    assert "already tracked" in caplog.text
