#!/usr/bin/env python3
"""Drive a ResourceMonitor against a synthetic resource field.

Every probe watches a patch that drains at its own noisy rate.  The
script runs the monitor for a number of cycles and prints the smoothed
depletion rate and forecast of every product at the end.

Usage
-----
::

    python scripts/simulate.py --probes 50 --cycles 36000

Options::

    --probes N           Number of probes to place (default: 20)
    --cycles N           Number of cycles to simulate (default: 18000)
    --seed N             Random seed (default: 1)
    --snapshot FILE      Write a JSON snapshot of the final state to FILE
    -v, --verbose        Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyyarm import MonitorConfig, ResourceMonitor, SignalReport, dump_snapshot, product_key  # noqa: E402

_PRODUCTS = (("item", "iron-ore"), ("item", "copper-ore"), ("item", "coal"), ("fluid", "crude-oil"))


class SyntheticField:
    """Signal adapter backed by randomly draining patches."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._patches: dict[int, dict[str, float]] = {}
        self._rates: dict[int, dict[str, float]] = {}
        self.now = 0

    def place(self, probe_id: int) -> None:
        chosen = self._rng.sample(_PRODUCTS, k=self._rng.randint(1, 2))
        keys = [product_key(signal_type, name) for signal_type, name in chosen]
        self._patches[probe_id] = {key: self._rng.uniform(5_000, 500_000) for key in keys}
        # Units per cycle.
        self._rates[probe_id] = {key: self._rng.uniform(0.0, 2.0) for key in keys}

    def get_readings(self, probe_id: int | str) -> SignalReport:
        patch = self._patches.get(int(probe_id))
        if patch is None:
            return SignalReport(valid=False)
        readings: dict[str, float] = {}
        for key, initial in patch.items():
            noise = self._rng.uniform(0.9, 1.1)
            remaining = initial - self._rates[int(probe_id)][key] * self.now * noise
            if remaining > 0:
                readings[key] = round(remaining)
        return SignalReport(readings=readings)

    def is_valid(self, probe_id: int | str) -> bool:
        return int(probe_id) in self._patches


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate resource depletion monitoring.")
    parser.add_argument("--probes", type=int, default=20)
    parser.add_argument("--cycles", type=int, default=18_000)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--snapshot", type=Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    field = SyntheticField(random.Random(args.seed))
    monitor = ResourceMonitor(field, MonitorConfig.from_env())
    for probe_id in range(args.probes):
        field.place(probe_id)
        monitor.add(probe_id, f"pole-{probe_id}", site_label=f"site-{probe_id % 4}")

    busiest = 0
    for now in range(args.cycles):
        field.now = now
        busiest = max(busiest, monitor.on_cycle(now))

    print(f"Simulated {args.cycles} cycles, at most {busiest} probe(s) refreshed in one cycle\n")
    for label, records in sorted(monitor.sites().items()):
        print(f"[{label}]")
        for record in records:
            for key, state in sorted(record.products.items()):
                forecast = "never" if state.minutes_to_deplete is None else f"{state.minutes_to_deplete:,.1f} min"
                print(
                    f"  probe {record.probe_id:>4} {key:<24} {state.amount:>12,.0f}"
                    f"  {state.delta_per_minute:>10,.1f}/min  {forecast}"
                )

    if args.snapshot is not None:
        args.snapshot.write_text(dump_snapshot(monitor.snapshot()), encoding="utf-8")
        print(f"\nSnapshot written to {args.snapshot}")


if __name__ == "__main__":
    main()
