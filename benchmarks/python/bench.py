# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
training-ledger benchmark.

Runs four consolidation scenarios against synthetic data sets and writes a
JSON results object to stdout. Uses time.perf_counter_ns and statistics from
the standard library.

Usage::

    python benchmarks/python/bench.py > results/python.json
"""

from __future__ import annotations

import datetime as dt
import json
import platform
import statistics
import sys
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from training_ledger import (
    Agency,
    BillingPipelineAggregator,
    BudgetAllocation,
    BudgetConsolidationEngine,
    CreditNote,
    Invoice,
    MemoryTariffSource,
    NeedKind,
    ProposedSlot,
    Quote,
    ScheduleConflictDetector,
    Sponsor,
    Tariff,
    TimeSlot,
    TrainingNeed,
    TrainingPlan,
)

# ─── Types ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScenarioResult:
    name: str
    iterations: int
    ops_per_sec: int
    mean_ns: int
    stdev_ns: int

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "iterations": self.iterations,
            "ops_per_sec": self.ops_per_sec,
            "mean_ns": self.mean_ns,
            "stdev_ns": self.stdev_ns,
        }


@dataclass(frozen=True)
class BenchmarkReport:
    version: str
    runtime: str
    timestamp: str
    scenarios: list[ScenarioResult]

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "runtime": self.runtime,
            "timestamp": self.timestamp,
            "scenarios": [s.to_dict() for s in self.scenarios],
        }


# ─── Timing helpers ───────────────────────────────────────────────────────────


def measure_iterations(fn: Callable[[], None], iterations: int) -> tuple[int, int]:
    """
    Run fn for `iterations` cycles and return (mean_ns, stdev_ns).
    """
    # Warm-up, not included in results
    warmup_count = min(50, iterations // 10)
    for _ in range(warmup_count):
        fn()

    samples: list[float] = []
    for _ in range(iterations):
        start = time.perf_counter_ns()
        fn()
        end = time.perf_counter_ns()
        samples.append(float(end - start))

    mean_ns = round(statistics.mean(samples))
    stdev_ns = round(statistics.stdev(samples)) if len(samples) > 1 else 0
    return mean_ns, stdev_ns


def to_scenario_result(
    name: str,
    iterations: int,
    fn: Callable[[], None],
) -> ScenarioResult:
    mean_ns, stdev_ns = measure_iterations(fn, iterations)
    ops_per_sec = round(1_000_000_000 / mean_ns) if mean_ns > 0 else 0
    return ScenarioResult(
        name=name,
        iterations=iterations,
        ops_per_sec=ops_per_sec,
        mean_ns=mean_ns,
        stdev_ns=stdev_ns,
    )


# ─── Synthetic data ───────────────────────────────────────────────────────────

SPONSORS = 50
DOCUMENTS_PER_SPONSOR = 20
NEEDS = 2_000
AGENCIES = 25
SLOTS = 5_000

DAY = dt.date(2026, 3, 10)


def build_session() -> tuple[list[Sponsor], list[Quote], list[Invoice], list[CreditNote]]:
    sponsors = [Sponsor(id=f"sp-{i}", budget=Decimal(10_000 + i)) for i in range(SPONSORS)]
    quotes: list[Quote] = []
    invoices: list[Invoice] = []
    notes: list[CreditNote] = []
    for i in range(SPONSORS * DOCUMENTS_PER_SPONSOR):
        sponsor_id = f"sp-{i % SPONSORS}"
        quotes.append(Quote(id=f"q-{i}", sponsor_id=sponsor_id, total_incl_tax=Decimal("499.99")))
        invoices.append(
            Invoice(
                id=f"inv-{i}",
                sponsor_id=sponsor_id,
                total_incl_tax=Decimal("450.10"),
                amount_paid=Decimal("120.33"),
            )
        )
        if i % 5 == 0:
            notes.append(CreditNote(id=f"cn-{i}", invoice_id=f"inv-{i}", total_incl_tax=Decimal("15.05")))
    return sponsors, quotes, invoices, notes


def build_budget() -> tuple[MemoryTariffSource, TrainingPlan, list[Agency], list[BudgetAllocation], list[TrainingNeed]]:
    tariffs = MemoryTariffSource(
        Tariff(id=f"t-{p}", product_id=f"p-{p}", price_excl_tax=Decimal(500 + p * 10), is_default=True)
        for p in range(100)
    )
    plan = TrainingPlan(id="plan", enterprise_id="acme", fiscal_year=2026, allocated_total=Decimal("2000000"))
    agencies = [Agency(id="hq", name="HQ", is_head_office=True)] + [
        Agency(id=f"ag-{a}", name=f"Agency {a:02d}") for a in range(AGENCIES)
    ]
    allocations = [BudgetAllocation(agency_id=f"ag-{a}", allocated=Decimal("60000")) for a in range(AGENCIES)]
    needs = [
        TrainingNeed(
            id=f"n-{i}",
            enterprise_id="acme",
            fiscal_year=2026,
            kind=NeedKind.PLAN if i % 2 else NeedKind.ONE_OFF,
            product_id=f"p-{i % 100}",
            agency_ids=[f"ag-{i % (AGENCIES + 1)}"] if i % (AGENCIES + 1) < AGENCIES else [],
        )
        for i in range(NEEDS)
    ]
    return tariffs, plan, agencies, allocations, needs


def build_schedule() -> list[TimeSlot]:
    slots: list[TimeSlot] = []
    for i in range(SLOTS):
        hour = 8 + (i % 9)
        slots.append(
            TimeSlot(
                id=f"sl-{i}",
                session_id=f"s-{i % 200}",
                date=DAY + dt.timedelta(days=i % 20),
                start=dt.time(hour, 0),
                end=dt.time(hour + 1, 30),
                trainer_id=f"tr-{i % 40}",
                room_id=f"rm-{i % 15}",
            )
        )
    return slots


# ─── Scenarios ────────────────────────────────────────────────────────────────


def bench_billing_pipeline() -> ScenarioResult:
    aggregator = BillingPipelineAggregator()
    sponsors, quotes, invoices, notes = build_session()

    def run() -> None:
        aggregator.aggregate("session-bench", sponsors, quotes, invoices, notes)

    return to_scenario_result("billing_pipeline", 200, run)


def bench_annual_view() -> ScenarioResult:
    tariffs, plan, _, _, needs = build_budget()
    engine = BudgetConsolidationEngine(tariffs)

    def run() -> None:
        engine.annual_view("acme", 2026, needs, plan=plan)

    return to_scenario_result("annual_view", 200, run)


def bench_agency_alerts() -> ScenarioResult:
    tariffs, plan, agencies, allocations, needs = build_budget()
    engine = BudgetConsolidationEngine(tariffs)

    def run() -> None:
        engine.alerts("acme", 2026, needs, plan=plan, agencies=agencies, allocations=allocations)

    return to_scenario_result("agency_alerts", 200, run)


def bench_conflict_detection() -> ScenarioResult:
    detector = ScheduleConflictDetector()
    slots = build_schedule()
    proposal = ProposedSlot(
        date=DAY, start=dt.time(10, 0), end=dt.time(12, 0), trainer_id="tr-2", room_id="rm-2"
    )

    def run() -> None:
        detector.detect(proposal, slots)

    return to_scenario_result("conflict_detection", 500, run)


# ─── Entry point ─────────────────────────────────────────────────────────────


def main() -> None:
    scenarios = [
        bench_billing_pipeline(),
        bench_annual_view(),
        bench_agency_alerts(),
        bench_conflict_detection(),
    ]

    python_version = (
        f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    )
    runtime = f"cpython-{python_version}-{platform.machine()}"

    report = BenchmarkReport(
        version=python_version,
        runtime=runtime,
        timestamp=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        scenarios=scenarios,
    )

    json.dump(report.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
