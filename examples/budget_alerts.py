# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
budget_alerts.py

Demonstrates the yearly training budget of an enterprise:
  1. Distribute the annual plan across the head office and two agencies.
  2. Consolidate plan and one-off needs, priced from the tariff catalog.
  3. Print the per-agency table and log the resulting alerts.

Run with:  python examples/budget_alerts.py
(from the repository root with training-ledger installed)
"""

import logging
from decimal import Decimal

from training_ledger import (
    Agency,
    AllocationExceedsPlanError,
    BudgetAllocation,
    BudgetConsolidationEngine,
    MemoryTariffSource,
    NeedKind,
    Tariff,
    TrainingNeed,
    TrainingPlan,
    apply_allocation,
    build_distribution,
    log_budget_alerts,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

# ─── Catalog and plan ─────────────────────────────────────────────────────────

tariffs = MemoryTariffSource(
    [
        Tariff(id="t-excel", product_id="p-excel", price_excl_tax=Decimal("850"), is_default=True),
        Tariff(id="t-excel-intra", product_id="p-excel", price_excl_tax=Decimal("2400")),
        Tariff(id="t-safety", product_id="p-safety", price_excl_tax=Decimal("1100"), is_default=True),
    ]
)
plan = TrainingPlan(id="plan-2026", enterprise_id="acme", fiscal_year=2026, allocated_total=Decimal("5000"))
agencies = [
    Agency(id="ag-hq", name="Paris HQ", is_head_office=True),
    Agency(id="ag-lyon", name="Lyon"),
    Agency(id="ag-nantes", name="Nantes"),
]

# ─── Distribution ─────────────────────────────────────────────────────────────

allocations: list[BudgetAllocation] = []
for allocation in [
    BudgetAllocation(agency_id=None, allocated=Decimal("2500")),
    BudgetAllocation(agency_id="ag-lyon", allocated=Decimal("1000")),
    BudgetAllocation(agency_id="ag-nantes", allocated=Decimal("2000")),
]:
    try:
        allocations = apply_allocation(plan, allocations, allocation)
    except AllocationExceedsPlanError as exc:
        print(f"Allocation refused: {exc}")

distribution = build_distribution(plan, allocations, agencies)
print(f"Plan {distribution.plan_id}: {distribution.total_allocated} of {distribution.budget_total} distributed")
for line in distribution.allocations:
    print(f"  {line.agency_name:<12} {line.allocated:>10}")

# ─── Needs ────────────────────────────────────────────────────────────────────

needs = [
    TrainingNeed(id="n1", enterprise_id="acme", fiscal_year=2026, kind=NeedKind.PLAN,
                 product_id="p-excel", agency_ids=["ag-lyon"]),
    TrainingNeed(id="n2", enterprise_id="acme", fiscal_year=2026, kind=NeedKind.PLAN,
                 product_id="p-excel", tariff_id="t-excel-intra", head_office=True),
    TrainingNeed(id="n3", enterprise_id="acme", fiscal_year=2026,
                 product_id="p-safety", agency_ids=["ag-lyon"]),
    TrainingNeed(id="n4", enterprise_id="acme", fiscal_year=2026, title="Unpriced coaching"),
]

engine = BudgetConsolidationEngine(tariffs)

annual = engine.annual_view("acme", 2026, needs, plan=plan)
print("\n── Annual view ───────────────────────────────────────")
print(f"  Plan engaged   : {annual.plan.engaged} / {annual.plan.allocated}")
print(f"  One-off spend  : {annual.one_off.engaged} ({annual.one_off.unpriced_need_count} unpriced)")
print(f"  Total spend    : {annual.total_spend}")

view = engine.agency_view("acme", 2026, needs, plan=plan, agencies=agencies, allocations=allocations)
print("\n── By agency ─────────────────────────────────────────")
for row in [*view.rows, view.global_row]:
    print(
        f"  {row.agency_name:<12} allocated={row.allocated:>9}  engaged={row.engaged:>9}  "
        f"remaining={row.remaining:>9}  {row.consumption_percent}%"
    )

# ─── Alerts ───────────────────────────────────────────────────────────────────

alerts = engine.alerts("acme", 2026, needs, plan=plan, agencies=agencies, allocations=allocations)
print(f"\n{log_budget_alerts(alerts, 'acme', 2026)} alert(s) raised")
