from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyyarm._constants import product_key
from pyyarm.ingestion.signals import SignalReport, coerce_report, merge_readings, readings_from_signals
from pyyarm.models.product import ProductState, Reading


def test_product_key_uses_locale_group() -> None:
    assert product_key("item", "iron-ore") == "item-name.iron-ore"
    assert product_key("fluid", "crude-oil") == "fluid-name.crude-oil"
    assert product_key("virtual", "signal-A") == "virtual-signal-name.signal-A"


def test_product_key_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        product_key("entity", "iron-ore")


def test_readings_from_signals_sums_duplicates_and_drops_zero() -> None:
    readings = readings_from_signals(
        [
            {"signal": {"type": "item", "name": "iron-ore"}, "count": 100},
            {"signal": {"type": "fluid", "name": "crude-oil"}, "count": "50"},
            {"signal": {"type": "item", "name": "iron-ore"}, "count": 20},
            {"signal": {"type": "item", "name": "stone"}, "count": 0},
            {"signal": {"type": "item"}, "count": 5},
        ]
    )

    assert readings == {
        "item-name.iron-ore": Reading(count=120),
        "fluid-name.crude-oil": Reading(count=50),
    }


def test_readings_from_signals_accepts_none() -> None:
    assert readings_from_signals(None) == {}


def test_coerce_report_from_tuple() -> None:
    report = coerce_report((True, {"item-name.coal": 5, "item-name.stone": {"count": "7"}}))

    assert report.valid
    assert report.readings["item-name.coal"].count == 5.0
    assert report.readings["item-name.stone"].count == 7.0


def test_coerce_report_invalid_ignores_readings() -> None:
    report = coerce_report((False, {"item-name.coal": {"count": 5}}))

    assert not report.valid
    assert report.readings == {}


def test_coerce_report_passthrough_and_mapping() -> None:
    report = SignalReport(readings={"item-name.coal": {"count": 1}})

    assert coerce_report(report) is report
    assert coerce_report({"item-name.coal": 3}).readings["item-name.coal"].count == 3.0


def test_coerce_report_rejects_unknown_shape() -> None:
    with pytest.raises(TypeError):
        coerce_report(42)


@pytest.mark.parametrize("count", ["abc", None, float("nan"), True, "inf", float("inf"), float("-inf")])
def test_reading_rejects_non_numeric_count(count: object) -> None:
    with pytest.raises(ValidationError):
        Reading(count=count)  # type: ignore[arg-type]


def test_merge_readings_visits_both_sides() -> None:
    known = ProductState(amount=10, initial_amount=10, last_update=0)
    fresh = Reading(count=4)
    kept = Reading(count=9)

    composite = merge_readings(
        {"item-name.coal": known, "item-name.stone": known},
        {"item-name.stone": kept, "item-name.copper-ore": fresh},
    )

    assert composite == {
        "item-name.coal": (known, None),
        "item-name.stone": (known, kept),
        "item-name.copper-ore": (None, fresh),
    }
