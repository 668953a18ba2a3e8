# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from training_ledger.billing.documents import (
    BillingDocument,
    CreditNote,
    Invoice,
    Quote,
    Sponsor,
)
from training_ledger.billing.pipeline import (
    BillingPipelineAggregator,
    SessionPipeline,
    SessionTotals,
    SponsorPipeline,
    SponsorSummary,
    SponsorTotals,
    build_session_pipeline,
)

__all__ = [
    "BillingDocument",
    "BillingPipelineAggregator",
    "CreditNote",
    "Invoice",
    "Quote",
    "SessionPipeline",
    "SessionTotals",
    "Sponsor",
    "SponsorPipeline",
    "SponsorSummary",
    "SponsorTotals",
    "build_session_pipeline",
]
