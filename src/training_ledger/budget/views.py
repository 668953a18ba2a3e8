# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Value structures returned by the budget consolidation engine."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from training_ledger.money import HUNDRED, round_cents
from training_ledger.types import ZERO

RowScope = Literal["head_office", "agency", "global"]


def consumption_percent(engaged: Decimal, allocated: Decimal) -> Decimal:
    """
    Share of an allocation already engaged, in percent, rounded to 0.01.

    Defined as 0 when nothing is allocated; the overspend check on
    ``remaining`` covers spend against an empty allocation.
    """
    if allocated == 0:
        return ZERO
    return round_cents(engaged / allocated * HUNDRED)


# ---------------------------------------------------------------------------
# Annual view
# ---------------------------------------------------------------------------


class PlanSummary(BaseModel, frozen=True):
    """Plan side of the annual view."""

    allocated: Decimal = Field(..., description="Allocated total of the year's plan.")
    engaged: Decimal = Field(..., description="Default-tariff cost of plan-linked needs.")
    remaining: Decimal = Field(..., description="allocated - engaged")
    need_count: int = Field(..., ge=0)
    unpriced_need_count: int = Field(
        default=0,
        ge=0,
        description="Needs counted but contributing nothing because no tariff could be resolved.",
    )


class OneOffSummary(BaseModel, frozen=True):
    """One-off (out-of-plan) side of the annual view."""

    engaged: Decimal
    need_count: int = Field(..., ge=0)
    unpriced_need_count: int = Field(default=0, ge=0)


class AnnualConsolidation(BaseModel, frozen=True):
    """Annual view for one (enterprise, fiscal year)."""

    enterprise_id: str
    fiscal_year: int
    has_plan: bool
    plan: PlanSummary
    one_off: OneOffSummary
    total_spend: Decimal = Field(..., description="plan.engaged + one_off.engaged")
    vigilance_threshold: int


# ---------------------------------------------------------------------------
# Per-agency view
# ---------------------------------------------------------------------------


class AgencyBudgetRow(BaseModel, frozen=True):
    """One row of the per-agency view. ``agency_id=None`` is the head office or the global row."""

    agency_id: Optional[str] = None
    agency_name: str
    scope: RowScope
    allocated: Decimal
    engaged_plan: Decimal
    engaged_one_off: Decimal
    engaged: Decimal
    remaining: Decimal = Field(..., description="allocated - engaged")
    consumption_percent: Decimal


class AgencyConsolidation(BaseModel, frozen=True):
    """Per-agency view for one (enterprise, fiscal year)."""

    enterprise_id: str
    fiscal_year: int
    has_plan: bool
    rows: list[AgencyBudgetRow] = Field(default_factory=list)
    global_row: AgencyBudgetRow
    allocated_distributed: Decimal = Field(
        ..., description="Sum of the per-agency allocations."
    )
    vigilance_threshold: int


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


class AlertKind(str, Enum):
    VIGILANCE = "vigilance"
    OVERSPEND = "overspend"


class AlertScope(str, Enum):
    AGENCY = "agency"
    ENTERPRISE_GLOBAL = "enterprise_global"


class BudgetAlert(BaseModel, frozen=True):
    """Derived, non-persisted budget warning for one row."""

    kind: AlertKind
    scope: AlertScope
    agency_id: Optional[str] = None
    entity_name: str
    allocated: Decimal
    engaged: Decimal
    remaining: Decimal
    percentage: Decimal = Field(..., description="Consumption in percent of the allocation.")
    threshold: int
