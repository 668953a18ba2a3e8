# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Training budget consolidation for one enterprise and fiscal year.

Committed spend is summed from two sources: the needs linked to the year's
annual plan and the one-off needs of the same year. Each need is priced by
its catalog tariff; a need with nothing to price it is still counted but
contributes zero. The per-agency view splits the same spend by the bucket
that bears each need and compares it with the agency allocations.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from training_ledger.budget.alerts import evaluate_alerts
from training_ledger.budget.distribution import validate_threshold
from training_ledger.budget.needs import (
    Agency,
    BudgetAllocation,
    TrainingNeed,
    TrainingPlan,
)
from training_ledger.budget.views import (
    AgencyBudgetRow,
    AgencyConsolidation,
    AnnualConsolidation,
    BudgetAlert,
    OneOffSummary,
    PlanSummary,
    RowScope,
    consumption_percent,
)
from training_ledger.config import BudgetConfig, EngineConfig
from training_ledger.money import round_cents, sum_cents
from training_ledger.sources import TariffSource
from training_ledger.types import ZERO, NeedKind

logger = logging.getLogger("training_ledger.budget")


# ---------------------------------------------------------------------------
# Internal engagement state
# ---------------------------------------------------------------------------


class _Engagement:
    """Mutable accumulator for one need kind during consolidation."""

    def __init__(self) -> None:
        self.total = ZERO
        self.count = 0
        self.unpriced = 0
        self.by_bearer: dict[Optional[str], Decimal] = defaultdict(lambda: ZERO)

    def add(self, bearer: Optional[str], cost: Optional[Decimal]) -> None:
        self.count += 1
        if cost is None:
            self.unpriced += 1
            return
        self.total = round_cents(self.total + cost)
        self.by_bearer[bearer] = round_cents(self.by_bearer[bearer] + cost)


# ---------------------------------------------------------------------------
# BudgetConsolidationEngine
# ---------------------------------------------------------------------------


class BudgetConsolidationEngine:
    """
    Consolidates training budgets across plan and one-off spend.

    The engine reads tariffs through a :class:`TariffSource`, resolving all
    the needs of a call in one batch, and otherwise works on rows the caller
    has already fetched. It holds no state between calls.

    Usage::

        engine = BudgetConsolidationEngine(MemoryTariffSource(tariffs))
        annual = engine.annual_view("acme", 2026, needs, plan=plan)
        by_agency = engine.agency_view(
            "acme", 2026, needs, plan=plan, agencies=agencies, allocations=allocations
        )
        alerts = engine.alerts(
            "acme", 2026, needs, plan=plan, agencies=agencies, allocations=allocations
        )
    """

    def __init__(
        self,
        tariffs: TariffSource,
        config: EngineConfig | BudgetConfig | None = None,
    ) -> None:
        if isinstance(config, EngineConfig):
            config = config.budget
        self._config = config or BudgetConfig()
        self._tariffs = tariffs

    # ─── Pricing ──────────────────────────────────────────────────────────────

    def resolve_costs(self, needs: Sequence[TrainingNeed]) -> dict[str, Optional[Decimal]]:
        """
        Price every need in one batch.

        An explicit ``tariff_id`` wins over the product's default tariff.
        Needs with no product, an unknown tariff, or a product without a
        default tariff map to None.

        Returns:
            need id -> cost before tax, or None when the need is unpriced.
        """
        tariff_ids = sorted({n.tariff_id for n in needs if n.tariff_id})
        product_ids = sorted({n.product_id for n in needs if not n.tariff_id and n.product_id})

        explicit: dict[str, Decimal] = {}
        if tariff_ids:
            for tariff in self._tariffs.tariffs_by_id(tariff_ids):
                explicit[tariff.id] = tariff.price_excl_tax

        defaults: dict[str, Decimal] = {}
        if product_ids:
            for tariff in self._tariffs.default_tariffs(product_ids):
                if tariff.is_default:
                    defaults.setdefault(tariff.product_id, tariff.price_excl_tax)

        costs: dict[str, Optional[Decimal]] = {}
        for need in needs:
            if need.tariff_id:
                costs[need.id] = explicit.get(need.tariff_id)
            elif need.product_id:
                costs[need.id] = defaults.get(need.product_id)
            else:
                costs[need.id] = None
        return costs

    # ─── Views ────────────────────────────────────────────────────────────────

    def annual_view(
        self,
        enterprise_id: str,
        fiscal_year: int,
        needs: Iterable[TrainingNeed],
        plan: TrainingPlan | None = None,
        threshold: int | None = None,
    ) -> AnnualConsolidation:
        """
        Consolidate plan and one-off spend for a year.

        Args:
            enterprise_id: Enterprise being consolidated.
            fiscal_year:   Target year of the needs.
            needs:         Training needs; rows outside the (enterprise, year)
                           scope and archived rows are ignored.
            plan:          The year's plan, if any. Archived plans count as absent.
            threshold:     Vigilance threshold overriding the plan's.
        """
        active_plan = self._active_plan(plan, enterprise_id, fiscal_year)
        plan_spend, one_off_spend = self._engage(enterprise_id, fiscal_year, needs, set())
        allocated = round_cents(active_plan.allocated_total) if active_plan else ZERO

        return AnnualConsolidation(
            enterprise_id=enterprise_id,
            fiscal_year=fiscal_year,
            has_plan=active_plan is not None,
            plan=PlanSummary(
                allocated=allocated,
                engaged=plan_spend.total,
                remaining=allocated - plan_spend.total,
                need_count=plan_spend.count,
                unpriced_need_count=plan_spend.unpriced,
            ),
            one_off=OneOffSummary(
                engaged=one_off_spend.total,
                need_count=one_off_spend.count,
                unpriced_need_count=one_off_spend.unpriced,
            ),
            total_spend=round_cents(plan_spend.total + one_off_spend.total),
            vigilance_threshold=self._threshold(active_plan, threshold),
        )

    def agency_view(
        self,
        enterprise_id: str,
        fiscal_year: int,
        needs: Iterable[TrainingNeed],
        plan: TrainingPlan | None = None,
        agencies: Iterable[Agency] = (),
        allocations: Iterable[BudgetAllocation] = (),
        threshold: int | None = None,
    ) -> AgencyConsolidation:
        """
        Consolidate spend per agency, plus one global row.

        Rows come head office first, then active agencies by name, then any
        agency referenced by a need or an allocation but missing from
        ``agencies``. The global row's engaged figures are the sum of the
        rows; its allocation is the plan total, or the sum of allocations
        when there is no plan.
        """
        active_plan = self._active_plan(plan, enterprise_id, fiscal_year)
        agency_list = list(agencies)
        head_office_ids = {agency.id for agency in agency_list if agency.is_head_office}

        plan_spend, one_off_spend = self._engage(
            enterprise_id, fiscal_year, needs, head_office_ids
        )

        allocated_by_bucket: dict[Optional[str], Decimal] = {}
        if active_plan is not None:
            for allocation in allocations:
                if allocation.plan_id is not None and allocation.plan_id != active_plan.id:
                    continue
                bucket = None if allocation.agency_id in head_office_ids else allocation.agency_id
                allocated_by_bucket[bucket] = round_cents(
                    allocated_by_bucket.get(bucket, ZERO) + allocation.allocated
                )

        rows = [
            self._row(
                None,
                self._config.head_office_label,
                "head_office",
                allocated_by_bucket.get(None, ZERO),
                plan_spend.by_bearer.get(None, ZERO),
                one_off_spend.by_bearer.get(None, ZERO),
            )
        ]

        listed: set[str] = set()
        active = sorted(
            (a for a in agency_list if a.active and not a.is_head_office),
            key=lambda agency: (agency.name, agency.id),
        )
        for agency in active:
            listed.add(agency.id)
            rows.append(
                self._row(
                    agency.id,
                    agency.name,
                    "agency",
                    allocated_by_bucket.get(agency.id, ZERO),
                    plan_spend.by_bearer.get(agency.id, ZERO),
                    one_off_spend.by_bearer.get(agency.id, ZERO),
                )
            )

        names = {agency.id: agency.name for agency in agency_list}
        referenced = (
            set(allocated_by_bucket) | set(plan_spend.by_bearer) | set(one_off_spend.by_bearer)
        )
        for agency_id in sorted(i for i in referenced if i is not None and i not in listed):
            rows.append(
                self._row(
                    agency_id,
                    names.get(agency_id, self._config.unknown_agency_label),
                    "agency",
                    allocated_by_bucket.get(agency_id, ZERO),
                    plan_spend.by_bearer.get(agency_id, ZERO),
                    one_off_spend.by_bearer.get(agency_id, ZERO),
                )
            )

        allocated_distributed = sum_cents(row.allocated for row in rows)
        global_allocated = (
            round_cents(active_plan.allocated_total) if active_plan else allocated_distributed
        )
        global_row = self._row(
            None,
            self._config.global_label,
            "global",
            global_allocated,
            sum_cents(row.engaged_plan for row in rows),
            sum_cents(row.engaged_one_off for row in rows),
        )

        logger.debug(
            "agency_consolidation_built",
            extra={
                "enterprise_id": enterprise_id,
                "fiscal_year": fiscal_year,
                "row_count": len(rows),
                "engaged": str(global_row.engaged),
                "allocated": str(global_row.allocated),
            },
        )

        return AgencyConsolidation(
            enterprise_id=enterprise_id,
            fiscal_year=fiscal_year,
            has_plan=active_plan is not None,
            rows=rows,
            global_row=global_row,
            allocated_distributed=allocated_distributed,
            vigilance_threshold=self._threshold(active_plan, threshold),
        )

    def alerts(
        self,
        enterprise_id: str,
        fiscal_year: int,
        needs: Iterable[TrainingNeed],
        plan: TrainingPlan | None = None,
        agencies: Iterable[Agency] = (),
        allocations: Iterable[BudgetAllocation] = (),
        threshold: int | None = None,
    ) -> list[BudgetAlert]:
        """
        Evaluate vigilance and overspend alerts for every agency row and the
        global row. A year without an active plan yields no alerts.
        """
        view = self.agency_view(
            enterprise_id,
            fiscal_year,
            needs,
            plan=plan,
            agencies=agencies,
            allocations=allocations,
            threshold=threshold,
        )
        if not view.has_plan:
            return []
        return evaluate_alerts([*view.rows, view.global_row], view.vigilance_threshold)

    # ─── Private helpers ──────────────────────────────────────────────────────

    def _engage(
        self,
        enterprise_id: str,
        fiscal_year: int,
        needs: Iterable[TrainingNeed],
        head_office_ids: set[str],
    ) -> tuple[_Engagement, _Engagement]:
        scoped = [
            need
            for need in needs
            if need.enterprise_id == enterprise_id
            and need.fiscal_year == fiscal_year
            and not need.archived
        ]
        costs = self.resolve_costs(scoped)

        plan_spend = _Engagement()
        one_off_spend = _Engagement()
        for need in scoped:
            bearer = need.bearer_agency_id
            if bearer in head_office_ids:
                bearer = None
            target = plan_spend if need.kind == NeedKind.PLAN else one_off_spend
            target.add(bearer, costs[need.id])
        return plan_spend, one_off_spend

    def _active_plan(
        self,
        plan: TrainingPlan | None,
        enterprise_id: str,
        fiscal_year: int,
    ) -> TrainingPlan | None:
        if plan is None or plan.archived:
            return None
        if plan.enterprise_id != enterprise_id or plan.fiscal_year != fiscal_year:
            return None
        return plan

    def _threshold(self, plan: TrainingPlan | None, override: int | None) -> int:
        if override is not None:
            return validate_threshold(override)
        if plan is not None and plan.vigilance_threshold is not None:
            return plan.vigilance_threshold
        return self._config.default_vigilance_threshold

    @staticmethod
    def _row(
        agency_id: Optional[str],
        name: str,
        scope: RowScope,
        allocated: Decimal,
        engaged_plan: Decimal,
        engaged_one_off: Decimal,
    ) -> AgencyBudgetRow:
        engaged = round_cents(engaged_plan + engaged_one_off)
        return AgencyBudgetRow(
            agency_id=agency_id,
            agency_name=name,
            scope=scope,
            allocated=allocated,
            engaged_plan=engaged_plan,
            engaged_one_off=engaged_one_off,
            engaged=engaged,
            remaining=round_cents(allocated - engaged),
            consumption_percent=consumption_percent(engaged, allocated),
        )
