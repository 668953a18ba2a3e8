# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from training_ledger.budget.alerts import evaluate_alerts, evaluate_row, log_budget_alerts
from training_ledger.budget.consolidation import BudgetConsolidationEngine
from training_ledger.budget.distribution import (
    AllocationLine,
    BudgetDistribution,
    apply_allocation,
    build_distribution,
    validate_threshold,
)
from training_ledger.budget.needs import (
    Agency,
    BudgetAllocation,
    PlanArchive,
    TrainingNeed,
    TrainingPlan,
    archive_plan,
)
from training_ledger.budget.views import (
    AgencyBudgetRow,
    AgencyConsolidation,
    AlertKind,
    AlertScope,
    AnnualConsolidation,
    BudgetAlert,
    OneOffSummary,
    PlanSummary,
    consumption_percent,
)

__all__ = [
    "Agency",
    "AgencyBudgetRow",
    "AgencyConsolidation",
    "AlertKind",
    "AlertScope",
    "AllocationLine",
    "AnnualConsolidation",
    "BudgetAlert",
    "BudgetAllocation",
    "BudgetConsolidationEngine",
    "BudgetDistribution",
    "OneOffSummary",
    "PlanArchive",
    "PlanSummary",
    "TrainingNeed",
    "TrainingPlan",
    "apply_allocation",
    "archive_plan",
    "build_distribution",
    "consumption_percent",
    "evaluate_alerts",
    "evaluate_row",
    "log_budget_alerts",
    "validate_threshold",
]
