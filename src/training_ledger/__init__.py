# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
training-ledger: financial consolidation and scheduling-conflict engine for
training organisations.

Quick start::

    from training_ledger import BillingPipelineAggregator, Invoice, Sponsor

    pipeline = BillingPipelineAggregator().aggregate(
        "session-1",
        sponsors=[Sponsor(id="sp-1", budget="10000")],
        invoices=[Invoice(id="inv-1", sponsor_id="sp-1", total_incl_tax="6000")],
    )
    pipeline.sponsors[0].totals.remaining_to_invoice  # Decimal("4000.00")
"""

from training_ledger.billing import (
    BillingPipelineAggregator,
    CreditNote,
    Invoice,
    Quote,
    SessionPipeline,
    SessionTotals,
    Sponsor,
    SponsorPipeline,
    SponsorSummary,
    SponsorTotals,
    build_session_pipeline,
)
from training_ledger.budget import (
    Agency,
    AgencyBudgetRow,
    AgencyConsolidation,
    AlertKind,
    AlertScope,
    AnnualConsolidation,
    BudgetAlert,
    BudgetAllocation,
    BudgetConsolidationEngine,
    BudgetDistribution,
    PlanArchive,
    TrainingNeed,
    TrainingPlan,
    apply_allocation,
    archive_plan,
    build_distribution,
    evaluate_alerts,
    log_budget_alerts,
    validate_threshold,
)
from training_ledger.config import BillingConfig, BudgetConfig, EngineConfig, SchedulingConfig
from training_ledger.errors import (
    AllocationExceedsPlanError,
    ConfigurationError,
    InvalidThresholdError,
    NonPositiveBalanceError,
    TrainingLedgerError,
)
from training_ledger.money import (
    DocumentLine,
    DocumentTotals,
    balance_amount,
    document_totals,
    down_payment_amount,
    line_amount,
    line_tax,
    payment_status,
    round_cents,
    sum_cents,
)
from training_ledger.scheduling import (
    ConflictKind,
    PlanningStats,
    ProposedSlot,
    ScheduleConflictDetector,
    SlotConflict,
    TimeSlot,
    detect_conflicts,
    group_overlapping,
    planning_stats,
    position_slots,
)
from training_ledger.sources import MemoryTariffSource, Tariff, TariffSource
from training_ledger.types import (
    ZERO,
    CreditNoteStatus,
    InvoiceStatus,
    InvoiceType,
    Modality,
    NeedKind,
    PartyRef,
    PersonRef,
    QuoteStatus,
    SubrogationMode,
)

__all__ = [
    # Engines
    "BillingPipelineAggregator",
    "BudgetConsolidationEngine",
    "ScheduleConflictDetector",
    # Configuration
    "EngineConfig",
    "BillingConfig",
    "BudgetConfig",
    "SchedulingConfig",
    # Errors
    "TrainingLedgerError",
    "AllocationExceedsPlanError",
    "ConfigurationError",
    "InvalidThresholdError",
    "NonPositiveBalanceError",
    # Shared types
    "ZERO",
    "PartyRef",
    "PersonRef",
    "SubrogationMode",
    "QuoteStatus",
    "InvoiceStatus",
    "InvoiceType",
    "CreditNoteStatus",
    "Modality",
    "NeedKind",
    # Money
    "DocumentLine",
    "DocumentTotals",
    "round_cents",
    "line_amount",
    "line_tax",
    "sum_cents",
    "document_totals",
    "down_payment_amount",
    "balance_amount",
    "payment_status",
    # Billing
    "Sponsor",
    "Quote",
    "Invoice",
    "CreditNote",
    "SponsorSummary",
    "SponsorTotals",
    "SponsorPipeline",
    "SessionTotals",
    "SessionPipeline",
    "build_session_pipeline",
    # Budget
    "TrainingPlan",
    "TrainingNeed",
    "Agency",
    "BudgetAllocation",
    "PlanArchive",
    "AnnualConsolidation",
    "AgencyBudgetRow",
    "AgencyConsolidation",
    "AlertKind",
    "AlertScope",
    "BudgetAlert",
    "BudgetDistribution",
    "archive_plan",
    "apply_allocation",
    "build_distribution",
    "validate_threshold",
    "evaluate_alerts",
    "log_budget_alerts",
    # Tariffs
    "Tariff",
    "TariffSource",
    "MemoryTariffSource",
    # Scheduling
    "TimeSlot",
    "ProposedSlot",
    "SlotConflict",
    "ConflictKind",
    "PlanningStats",
    "detect_conflicts",
    "planning_stats",
    "group_overlapping",
    "position_slots",
]
