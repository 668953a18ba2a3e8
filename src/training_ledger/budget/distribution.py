# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Distribution of a plan's budget across the head office and branch agencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from training_ledger.budget.needs import Agency, BudgetAllocation, TrainingPlan
from training_ledger.config import BudgetConfig
from training_ledger.errors import AllocationExceedsPlanError, InvalidThresholdError
from training_ledger.money import round_cents, sum_cents


class AllocationLine(BaseModel, frozen=True):
    agency_id: Optional[str] = None
    agency_name: str
    allocated: Decimal


class BudgetDistribution(BaseModel, frozen=True):
    """How much of a plan has been handed out, and to whom."""

    plan_id: str
    budget_total: Decimal
    vigilance_threshold: int
    allocations: list[AllocationLine] = Field(default_factory=list)
    total_allocated: Decimal
    remaining_to_distribute: Decimal = Field(..., description="budget_total - total_allocated")


def validate_threshold(value: int | float | Decimal) -> int:
    """
    Check a vigilance threshold before it is stored on a plan.

    Raises:
        InvalidThresholdError: If ``value`` is outside 1..100.
    """
    if value < 1 or value > 100:
        raise InvalidThresholdError(value)
    return int(value)


def _plan_allocations(
    plan: TrainingPlan, allocations: Iterable[BudgetAllocation]
) -> list[BudgetAllocation]:
    return [a for a in allocations if a.plan_id is None or a.plan_id == plan.id]


def build_distribution(
    plan: TrainingPlan,
    allocations: Iterable[BudgetAllocation],
    agencies: Iterable[Agency] = (),
    config: BudgetConfig | None = None,
) -> BudgetDistribution:
    """Summarise the allocations of a plan, head office first."""
    config = config or BudgetConfig()
    names = {agency.id: agency.name for agency in agencies}

    lines = [
        AllocationLine(
            agency_id=allocation.agency_id,
            agency_name=(
                config.head_office_label
                if allocation.agency_id is None
                else names.get(allocation.agency_id, config.unknown_agency_label)
            ),
            allocated=round_cents(allocation.allocated),
        )
        for allocation in _plan_allocations(plan, allocations)
    ]
    lines.sort(key=lambda line: (line.agency_id is not None, line.agency_name))

    budget_total = round_cents(plan.allocated_total)
    total_allocated = sum_cents(line.allocated for line in lines)
    return BudgetDistribution(
        plan_id=plan.id,
        budget_total=budget_total,
        vigilance_threshold=plan.vigilance_threshold or config.default_vigilance_threshold,
        allocations=lines,
        total_allocated=total_allocated,
        remaining_to_distribute=budget_total - total_allocated,
    )


def apply_allocation(
    plan: TrainingPlan,
    allocations: Sequence[BudgetAllocation],
    allocation: BudgetAllocation,
) -> list[BudgetAllocation]:
    """
    Insert or replace one agency's allocation.

    The allocation replaces any existing row for the same agency (the head
    office being ``agency_id=None``). Inputs are left untouched.

    Raises:
        AllocationExceedsPlanError: If the allocations would sum above the
            plan's allocated total.
    """
    current = _plan_allocations(plan, allocations)
    others_total = sum_cents(a.allocated for a in current if a.agency_id != allocation.agency_id)
    requested_total = round_cents(others_total + allocation.allocated)
    plan_total = round_cents(plan.allocated_total)
    if requested_total > plan_total:
        raise AllocationExceedsPlanError(
            plan_id=plan.id, requested_total=requested_total, plan_total=plan_total
        )

    stored = allocation.model_copy(update={"plan_id": plan.id})
    result: list[BudgetAllocation] = []
    replaced = False
    for existing in current:
        if existing.agency_id == allocation.agency_id:
            if not replaced:
                result.append(stored)
                replaced = True
            continue
        result.append(existing)
    if not replaced:
        result.append(stored)
    return result
