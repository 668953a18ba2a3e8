# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for training-ledger tests."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

import pytest

from training_ledger.billing.pipeline import BillingPipelineAggregator
from training_ledger.budget.consolidation import BudgetConsolidationEngine
from training_ledger.budget.needs import Agency, TrainingPlan
from training_ledger.scheduling.conflicts import ScheduleConflictDetector
from training_ledger.sources import MemoryTariffSource, Tariff


class CountingTariffSource(MemoryTariffSource):
    """MemoryTariffSource that records every batch it is asked for."""

    def __init__(self, tariffs: Iterable[Tariff] = ()) -> None:
        super().__init__(tariffs)
        self.default_calls: list[list[str]] = []
        self.by_id_calls: list[list[str]] = []

    def default_tariffs(self, product_ids: Iterable[str]) -> list[Tariff]:
        batch = list(product_ids)
        self.default_calls.append(batch)
        return super().default_tariffs(batch)

    def tariffs_by_id(self, tariff_ids: Iterable[str]) -> list[Tariff]:
        batch = list(tariff_ids)
        self.by_id_calls.append(batch)
        return super().tariffs_by_id(batch)


@pytest.fixture
def tariff_source() -> CountingTariffSource:
    """A catalog with three products: two priced by default, one without a default."""
    return CountingTariffSource(
        [
            Tariff(id="t-excel", product_id="p-excel", price_excl_tax=Decimal("850"), is_default=True),
            Tariff(id="t-excel-intra", product_id="p-excel", price_excl_tax=Decimal("2400")),
            Tariff(id="t-safety", product_id="p-safety", price_excl_tax=Decimal("1100"), is_default=True),
            Tariff(id="t-free", product_id="p-webinar", price_excl_tax=Decimal("0"), is_default=True),
            Tariff(id="t-mgmt", product_id="p-management", price_excl_tax=Decimal("1500")),
        ]
    )


@pytest.fixture
def budget_engine(tariff_source: CountingTariffSource) -> BudgetConsolidationEngine:
    """A consolidation engine reading the test catalog, default configuration."""
    return BudgetConsolidationEngine(tariff_source)


@pytest.fixture
def plan() -> TrainingPlan:
    """The 2026 plan of 'acme': 5000 allocated, default threshold."""
    return TrainingPlan(
        id="plan-2026",
        enterprise_id="acme",
        fiscal_year=2026,
        allocated_total=Decimal("5000"),
        name="Plan 2026",
    )


@pytest.fixture
def agencies() -> list[Agency]:
    """Head office plus two branch agencies and one closed agency."""
    return [
        Agency(id="ag-hq", name="Paris HQ", is_head_office=True),
        Agency(id="ag-lyon", name="Lyon"),
        Agency(id="ag-bordeaux", name="Bordeaux"),
        Agency(id="ag-lille", name="Lille", active=False),
    ]


@pytest.fixture
def aggregator() -> BillingPipelineAggregator:
    return BillingPipelineAggregator()


@pytest.fixture
def detector() -> ScheduleConflictDetector:
    return ScheduleConflictDetector()
