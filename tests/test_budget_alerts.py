# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for vigilance and overspend alerts."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from training_ledger.budget.alerts import evaluate_alerts, evaluate_row, log_budget_alerts
from training_ledger.budget.consolidation import BudgetConsolidationEngine
from training_ledger.budget.needs import Agency, BudgetAllocation, TrainingNeed, TrainingPlan
from training_ledger.budget.views import AgencyBudgetRow, AlertKind, AlertScope
from training_ledger.sources import MemoryTariffSource, Tariff
from training_ledger.types import NeedKind


def _row(allocated: str, engaged: str, scope: str = "agency") -> AgencyBudgetRow:
    allocated_d = Decimal(allocated)
    engaged_d = Decimal(engaged)
    return AgencyBudgetRow(
        agency_id="ag-lyon" if scope == "agency" else None,
        agency_name="Lyon" if scope == "agency" else "Global",
        scope=scope,
        allocated=allocated_d,
        engaged_plan=engaged_d,
        engaged_one_off=Decimal("0"),
        engaged=engaged_d,
        remaining=allocated_d - engaged_d,
        consumption_percent=(engaged_d / allocated_d * 100).quantize(Decimal("0.01"))
        if allocated_d
        else Decimal("0"),
    )


@pytest.fixture
def small_plan() -> TrainingPlan:
    """A 1000 plan fully allocated to Lyon."""
    return TrainingPlan(id="plan-s", enterprise_id="acme", fiscal_year=2026, allocated_total=Decimal("1000"))


@pytest.fixture
def lyon_allocation() -> list[BudgetAllocation]:
    return [BudgetAllocation(agency_id="ag-lyon", allocated=Decimal("1000"), plan_id="plan-s")]


# ---------------------------------------------------------------------------
# TestEvaluateRow
# ---------------------------------------------------------------------------


class TestEvaluateRow:
    def test_vigilance_at_threshold_crossing(self) -> None:
        alert = evaluate_row(_row("1000", "850"), threshold=80)

        assert alert is not None
        assert alert.kind == AlertKind.VIGILANCE
        assert alert.percentage == Decimal("85.00")
        assert alert.remaining == Decimal("150")
        assert alert.threshold == 80

    def test_vigilance_fires_exactly_at_threshold(self) -> None:
        alert = evaluate_row(_row("1000", "800"), threshold=80)
        assert alert is not None and alert.kind == AlertKind.VIGILANCE

    def test_below_threshold_is_silent(self) -> None:
        assert evaluate_row(_row("1000", "799.99"), threshold=80) is None

    def test_overspend_takes_precedence(self) -> None:
        alert = evaluate_row(_row("1000", "1100"), threshold=80)

        assert alert is not None
        assert alert.kind == AlertKind.OVERSPEND
        assert alert.remaining == Decimal("-100")

    def test_fully_consumed_is_vigilance_not_overspend(self) -> None:
        alert = evaluate_row(_row("1000", "1000"), threshold=80)
        assert alert is not None and alert.kind == AlertKind.VIGILANCE

    def test_spend_without_allocation_is_overspend(self) -> None:
        alert = evaluate_row(_row("0", "10"), threshold=80)
        assert alert is not None
        assert alert.kind == AlertKind.OVERSPEND
        assert alert.percentage == 0

    def test_empty_row_is_silent(self) -> None:
        assert evaluate_row(_row("0", "0"), threshold=1) is None

    def test_global_row_scope(self) -> None:
        alert = evaluate_row(_row("1000", "900", scope="global"), threshold=80)
        assert alert is not None
        assert alert.scope == AlertScope.ENTERPRISE_GLOBAL
        assert alert.agency_id is None

    def test_rows_are_evaluated_independently(self) -> None:
        alerts = evaluate_alerts(
            [_row("1000", "1100"), _row("5000", "1100", scope="global")], threshold=80
        )
        assert [a.scope for a in alerts] == [AlertScope.AGENCY]


# ---------------------------------------------------------------------------
# TestEngineAlerts
# ---------------------------------------------------------------------------


class TestEngineAlerts:
    def test_vigilance_example(
        self,
        budget_engine: BudgetConsolidationEngine,
        small_plan: TrainingPlan,
        agencies: list[Agency],
        lyon_allocation: list[BudgetAllocation],
    ) -> None:
        needs = [TrainingNeed(id="n", enterprise_id="acme", fiscal_year=2026,
                              product_id="p-excel", agency_ids=["ag-lyon"])]

        alerts = budget_engine.alerts(
            "acme", 2026, needs, plan=small_plan, agencies=agencies, allocations=lyon_allocation
        )

        assert [(a.scope, a.kind, a.percentage) for a in alerts] == [
            (AlertScope.AGENCY, AlertKind.VIGILANCE, Decimal("85.00")),
            (AlertScope.ENTERPRISE_GLOBAL, AlertKind.VIGILANCE, Decimal("85.00")),
        ]
        assert alerts[0].entity_name == "Lyon"

    def test_overspend_example(
        self,
        budget_engine: BudgetConsolidationEngine,
        small_plan: TrainingPlan,
        agencies: list[Agency],
        lyon_allocation: list[BudgetAllocation],
    ) -> None:
        needs = [TrainingNeed(id="n", enterprise_id="acme", fiscal_year=2026,
                              tariff_id="t-safety", agency_ids=["ag-lyon"])]

        alerts = budget_engine.alerts(
            "acme", 2026, needs, plan=small_plan, agencies=agencies, allocations=lyon_allocation
        )

        lyon = alerts[0]
        assert lyon.kind == AlertKind.OVERSPEND
        assert lyon.remaining == Decimal("-100")
        assert alerts[-1].scope == AlertScope.ENTERPRISE_GLOBAL

    def test_agency_and_global_flagged_separately(
        self,
        budget_engine: BudgetConsolidationEngine,
        plan: TrainingPlan,
        agencies: list[Agency],
    ) -> None:
        # Bordeaux overspends its 500 while the enterprise stays under 80 %.
        needs = [TrainingNeed(id="n", enterprise_id="acme", fiscal_year=2026, kind=NeedKind.PLAN,
                              product_id="p-excel", agency_ids=["ag-bordeaux"])]
        allocations = [BudgetAllocation(agency_id="ag-bordeaux", allocated=Decimal("500"))]

        alerts = budget_engine.alerts(
            "acme", 2026, needs, plan=plan, agencies=agencies, allocations=allocations
        )

        assert len(alerts) == 1
        assert alerts[0].agency_id == "ag-bordeaux"
        assert alerts[0].kind == AlertKind.OVERSPEND

    def test_just_below_threshold_is_silent(
        self, small_plan: TrainingPlan, agencies: list[Agency], lyon_allocation: list[BudgetAllocation]
    ) -> None:
        # 799.99 of 1000 displays as 80.00 % but stays under an 80 % threshold.
        engine = BudgetConsolidationEngine(
            MemoryTariffSource(
                [Tariff(id="t-odd", product_id="p-odd", price_excl_tax=Decimal("799.99"), is_default=True)]
            )
        )
        needs = [TrainingNeed(id="n", enterprise_id="acme", fiscal_year=2026,
                              product_id="p-odd", agency_ids=["ag-lyon"])]

        view = engine.agency_view(
            "acme", 2026, needs, plan=small_plan, agencies=agencies, allocations=lyon_allocation
        )
        alerts = engine.alerts(
            "acme", 2026, needs, plan=small_plan, agencies=agencies, allocations=lyon_allocation
        )

        assert view.rows[-1].consumption_percent == Decimal("80.00")
        assert alerts == []

    def test_plan_threshold_is_used(
        self,
        budget_engine: BudgetConsolidationEngine,
        small_plan: TrainingPlan,
        agencies: list[Agency],
        lyon_allocation: list[BudgetAllocation],
    ) -> None:
        relaxed = small_plan.model_copy(update={"vigilance_threshold": 90})
        needs = [TrainingNeed(id="n", enterprise_id="acme", fiscal_year=2026,
                              product_id="p-excel", agency_ids=["ag-lyon"])]
        assert budget_engine.alerts(
            "acme", 2026, needs, plan=relaxed, agencies=agencies, allocations=lyon_allocation
        ) == []

    def test_no_plan_means_no_alerts(
        self, budget_engine: BudgetConsolidationEngine, agencies: list[Agency]
    ) -> None:
        needs = [TrainingNeed(id="n", enterprise_id="acme", fiscal_year=2026, product_id="p-safety")]
        assert budget_engine.alerts("acme", 2026, needs, agencies=agencies) == []


# ---------------------------------------------------------------------------
# TestLogBudgetAlerts
# ---------------------------------------------------------------------------


class TestLogBudgetAlerts:
    def test_each_alert_is_logged_at_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        alerts = evaluate_alerts([_row("1000", "850"), _row("1000", "1100")], threshold=80)

        with caplog.at_level(logging.WARNING, logger="training_ledger.budget"):
            count = log_budget_alerts(alerts, "acme", 2026)

        assert count == 2
        records = [r for r in caplog.records if r.name == "training_ledger.budget"]
        assert [r.getMessage() for r in records] == ["budget_alert_triggered"] * 2
        assert records[0].alert_kind == "vigilance"
        assert records[1].alert_kind == "overspend"
        assert records[1].enterprise_id == "acme"

    def test_nothing_to_log(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="training_ledger.budget"):
            assert log_budget_alerts([], "acme", 2026) == 0
        assert caplog.records == []
