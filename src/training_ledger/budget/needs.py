# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Training budget rows: annual plans, agencies, allocations and training needs.

A training need never stores a price. Its committed cost comes from the
catalog tariff it points at (explicitly, or through its product's default
tariff) and is resolved by the consolidation engine.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from training_ledger.money import Money
from training_ledger.types import ZERO, NeedKind

# ─── Plan / agencies ──────────────────────────────────────────────────────────


class TrainingPlan(BaseModel):
    """Annual training plan: unique per (enterprise, fiscal year)."""

    id: str
    enterprise_id: str
    fiscal_year: int
    allocated_total: Money = ZERO
    vigilance_threshold: Optional[Annotated[int, Field(ge=1, le=100)]] = None
    name: Optional[str] = None
    archived_at: Optional[datetime] = None

    @property
    def archived(self) -> bool:
        return self.archived_at is not None


class Agency(BaseModel, frozen=True):
    """A branch agency of an enterprise. ``is_head_office`` marks the head office itself."""

    id: str
    name: str
    is_head_office: bool = False
    active: bool = True


class BudgetAllocation(BaseModel, frozen=True):
    """Share of a plan's budget given to one agency. ``agency_id=None`` is the head office."""

    agency_id: Optional[str] = None
    allocated: Money = Field(default=ZERO, ge=0)
    plan_id: Optional[str] = None


# ─── Training needs ───────────────────────────────────────────────────────────


class TrainingNeed(BaseModel):
    """
    A training need of an enterprise for a fiscal year.

    ``kind`` tells plan-linked needs from one-off ones. The cost is borne by
    a single bucket: the head office when ``head_office`` is set or no agency
    is listed, otherwise the first listed agency.
    """

    id: str
    enterprise_id: str
    fiscal_year: int
    kind: NeedKind = NeedKind.ONE_OFF
    plan_id: Optional[str] = None
    product_id: Optional[str] = None
    tariff_id: Optional[str] = None
    head_office: bool = False
    agency_ids: list[str] = Field(default_factory=list)
    title: Optional[str] = None
    archived_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def normalise_agency(cls, data: Any) -> Any:
        # Rows may carry a single agency_id instead of the list form.
        if isinstance(data, dict) and "agency_id" in data:
            data = dict(data)
            agency_id = data.pop("agency_id")
            agency_ids = list(data.get("agency_ids") or [])
            if agency_id is not None and agency_id not in agency_ids:
                agency_ids.insert(0, agency_id)
            data["agency_ids"] = agency_ids
        return data

    @field_validator("agency_ids", mode="before")
    @classmethod
    def none_means_no_agency(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("head_office", mode="before")
    @classmethod
    def none_means_not_head_office(cls, value: object) -> object:
        return False if value is None else value

    @property
    def bearer_agency_id(self) -> Optional[str]:
        """Agency carrying the cost; ``None`` means the head office."""
        if self.head_office or not self.agency_ids:
            return None
        return self.agency_ids[0]

    @property
    def archived(self) -> bool:
        return self.archived_at is not None


# ─── Plan archive ─────────────────────────────────────────────────────────────


class PlanArchive(BaseModel, frozen=True):
    """Result of archiving a plan: the archived plan and the needs it released."""

    plan: TrainingPlan
    detached_needs: list[TrainingNeed] = Field(default_factory=list)


def _linked_to(need: TrainingNeed, plan: TrainingPlan) -> bool:
    if need.plan_id is not None:
        return need.plan_id == plan.id
    return (
        need.kind == NeedKind.PLAN
        and need.enterprise_id == plan.enterprise_id
        and need.fiscal_year == plan.fiscal_year
    )


def archive_plan(
    plan: TrainingPlan,
    needs: list[TrainingNeed],
    at: datetime | None = None,
) -> PlanArchive:
    """
    Soft-delete a plan and detach its training needs.

    Archiving never cascades: every need linked to the plan becomes a one-off
    need of the same year and stays live. The inputs are not modified; the
    caller persists the returned rows.
    """
    if at is None:
        at = datetime.now(tz=timezone.utc)

    archived = plan.model_copy(update={"archived_at": plan.archived_at or at})
    detached = [
        need.model_copy(update={"kind": NeedKind.ONE_OFF, "plan_id": None})
        for need in needs
        if not need.archived and _linked_to(need, plan)
    ]
    return PlanArchive(plan=archived, detached_needs=detached)
