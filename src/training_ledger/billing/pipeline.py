# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Session billing pipeline.

Reconciles the quotes, invoices and credit notes issued against a session's
sponsors into per-sponsor and session-level totals. Documents are indexed
by sponsor once, so the cost stays linear in the number of documents no
matter how many sponsors the session has.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from decimal import Decimal
from typing import Optional, TypeVar

from pydantic import BaseModel, Field

from training_ledger.billing.documents import (
    BillingDocument,
    CreditNote,
    Invoice,
    Quote,
    Sponsor,
)
from training_ledger.config import BillingConfig, EngineConfig
from training_ledger.money import round_cents, sum_cents
from training_ledger.types import SubrogationMode

logger = logging.getLogger("training_ledger.billing")

DocumentT = TypeVar("DocumentT", bound=BillingDocument)


# ---------------------------------------------------------------------------
# Output models
# ---------------------------------------------------------------------------


class SponsorSummary(BaseModel, frozen=True):
    """Flattened sponsor row with display names resolved."""

    id: str
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    contact_id: Optional[str] = None
    contact_name: Optional[str] = None
    financer_id: Optional[str] = None
    financer_name: Optional[str] = None
    budget: Decimal
    subrogation_mode: SubrogationMode
    amount_company: Decimal
    amount_financer: Decimal
    bill_company: bool
    bill_financer: bool
    workflow_status: Optional[str] = None


class SponsorTotals(BaseModel, frozen=True):
    """Money figures for one sponsor."""

    budget: Decimal = Field(..., description="Allocated ceiling for the sponsor.")
    total_quoted: Decimal
    total_invoiced: Decimal
    total_paid: Decimal
    total_credited: Decimal
    remaining_to_invoice: Decimal = Field(..., description="budget - total_invoiced")
    remaining_to_collect: Decimal = Field(
        ..., description="total_invoiced - total_paid - total_credited"
    )


class SponsorPipeline(BaseModel, frozen=True):
    """All documents attributed to one sponsor, with their totals."""

    sponsor: SponsorSummary
    quotes: list[Quote] = Field(default_factory=list)
    invoices: list[Invoice] = Field(default_factory=list)
    credit_notes: list[CreditNote] = Field(default_factory=list)
    totals: SponsorTotals


class SessionTotals(BaseModel, frozen=True):
    """Session totals, always the sum of the per-sponsor totals."""

    budget: Decimal
    total_quoted: Decimal
    total_invoiced: Decimal
    total_paid: Decimal
    total_credited: Decimal


class SessionPipeline(BaseModel, frozen=True):
    """Billing pipeline of one session."""

    session_id: str
    sponsors: list[SponsorPipeline] = Field(default_factory=list)
    totals: SessionTotals
    unattributed_documents: int = Field(
        default=0,
        ge=0,
        description="Documents of the session that no sponsor could claim.",
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _index_by_sponsor(
    documents: Sequence[DocumentT],
    sponsor_ids: set[str],
) -> tuple[dict[str, list[DocumentT]], int]:
    """Group documents by sponsor id in one pass. Returns (index, unattributed)."""
    index: dict[str, list[DocumentT]] = defaultdict(list)
    unattributed = 0
    for document in documents:
        if document.sponsor_id is not None and document.sponsor_id in sponsor_ids:
            index[document.sponsor_id].append(document)
        else:
            unattributed += 1
    return index, unattributed


def _index_credit_notes(
    credit_notes: Sequence[CreditNote],
    sponsor_ids: set[str],
    invoice_owner: dict[str, str],
) -> tuple[dict[str, list[CreditNote]], int]:
    """
    Attribute credit notes to sponsors.

    A note belongs to its direct sponsor and to the sponsor owning the
    invoice it credits. When both links name different sponsors the note is
    listed under each of them, once.
    """
    index: dict[str, list[CreditNote]] = defaultdict(list)
    unattributed = 0
    for note in credit_notes:
        owners: list[str] = []
        if note.sponsor_id is not None and note.sponsor_id in sponsor_ids:
            owners.append(note.sponsor_id)
        if note.invoice_id is not None:
            owner: Optional[str] = invoice_owner.get(note.invoice_id)
            if owner is not None and owner not in owners:
                owners.append(owner)

        if not owners:
            unattributed += 1
        for owner_id in owners:
            index[owner_id].append(note)
    return index, unattributed


def _in_session(documents: Sequence[DocumentT], session_id: str) -> list[DocumentT]:
    return [d for d in documents if d.session_id is None or d.session_id == session_id]


def _creation_order(sponsors: Sequence[Sponsor]) -> list[Sponsor]:
    """Sponsors in creation order. Input order is kept unless every row is timestamped."""
    if sponsors and all(sponsor.created_at is not None for sponsor in sponsors):
        return sorted(sponsors, key=lambda sponsor: sponsor.created_at)  # type: ignore[arg-type,return-value]
    return list(sponsors)


# ---------------------------------------------------------------------------
# BillingPipelineAggregator
# ---------------------------------------------------------------------------


class BillingPipelineAggregator:
    """
    Builds the billing pipeline of a session from already fetched rows.

    The aggregator is stateless between calls: it never fetches, persists or
    validates anything beyond arithmetic. A sponsor without documents yields
    zero totals.

    Usage::

        aggregator = BillingPipelineAggregator()
        pipeline = aggregator.aggregate(
            "session-1",
            sponsors=sponsors,
            quotes=quotes,
            invoices=invoices,
            credit_notes=credit_notes,
        )
        pipeline.totals.total_invoiced
    """

    def __init__(self, config: EngineConfig | BillingConfig | None = None) -> None:
        if isinstance(config, EngineConfig):
            config = config.billing
        self._config = config or BillingConfig()

    def summarize_sponsor(self, sponsor: Sponsor) -> SponsorSummary:
        """Flatten a sponsor row and its embedded parties."""
        return SponsorSummary(
            id=sponsor.id,
            company_id=sponsor.company.id if sponsor.company else None,
            company_name=sponsor.company.name if sponsor.company else None,
            contact_id=sponsor.contact.id if sponsor.contact else None,
            contact_name=sponsor.contact.display_name if sponsor.contact else None,
            financer_id=sponsor.financer.id if sponsor.financer else None,
            financer_name=sponsor.financer.name if sponsor.financer else None,
            budget=round_cents(sponsor.budget),
            subrogation_mode=sponsor.subrogation_mode or self._config.default_subrogation_mode,
            amount_company=round_cents(sponsor.amount_company),
            amount_financer=round_cents(sponsor.amount_financer),
            bill_company=sponsor.bill_company,
            bill_financer=sponsor.bill_financer,
            workflow_status=sponsor.workflow_status,
        )

    def sponsor_totals(
        self,
        budget: Decimal,
        quotes: Sequence[Quote],
        invoices: Sequence[Invoice],
        credit_notes: Sequence[CreditNote],
    ) -> SponsorTotals:
        """Compute the money figures of one sponsor from its documents."""
        budget = round_cents(budget)
        total_quoted = sum_cents(quote.total_incl_tax for quote in quotes)
        total_invoiced = sum_cents(invoice.total_incl_tax for invoice in invoices)
        total_paid = sum_cents(invoice.amount_paid for invoice in invoices)
        total_credited = sum_cents(note.total_incl_tax for note in credit_notes)

        return SponsorTotals(
            budget=budget,
            total_quoted=total_quoted,
            total_invoiced=total_invoiced,
            total_paid=total_paid,
            total_credited=total_credited,
            remaining_to_invoice=round_cents(budget - total_invoiced),
            remaining_to_collect=round_cents(total_invoiced - total_paid - total_credited),
        )

    def aggregate(
        self,
        session_id: str,
        sponsors: Sequence[Sponsor],
        quotes: Sequence[Quote] = (),
        invoices: Sequence[Invoice] = (),
        credit_notes: Sequence[CreditNote] = (),
    ) -> SessionPipeline:
        """
        Build the billing pipeline of a session.

        Args:
            session_id:   The session being reconciled.
            sponsors:     The session's sponsors.
            quotes:       Quotes of the session, each tagged with a sponsor id.
            invoices:     Invoices of the session, each tagged with a sponsor id.
            credit_notes: Credit notes, tagged with a sponsor id and/or the
                          invoice they credit.

        Returns:
            A SessionPipeline whose session totals equal the sum of the
            per-sponsor totals.
        """
        ordered = _creation_order(sponsors)
        sponsor_ids = {sponsor.id for sponsor in ordered}

        session_quotes = _in_session(quotes, session_id)
        session_invoices = _in_session(invoices, session_id)
        session_notes = _in_session(credit_notes, session_id)

        quotes_by_sponsor, loose_quotes = _index_by_sponsor(session_quotes, sponsor_ids)
        invoices_by_sponsor, loose_invoices = _index_by_sponsor(session_invoices, sponsor_ids)
        invoice_owner = {
            invoice.id: sponsor_id
            for sponsor_id, sponsor_invoices in invoices_by_sponsor.items()
            for invoice in sponsor_invoices
        }
        notes_by_sponsor, loose_notes = _index_credit_notes(
            session_notes, sponsor_ids, invoice_owner
        )

        pipelines: list[SponsorPipeline] = []
        for sponsor in ordered:
            sponsor_quotes = quotes_by_sponsor.get(sponsor.id, [])
            sponsor_invoices = invoices_by_sponsor.get(sponsor.id, [])
            sponsor_notes = notes_by_sponsor.get(sponsor.id, [])
            pipelines.append(
                SponsorPipeline(
                    sponsor=self.summarize_sponsor(sponsor),
                    quotes=list(sponsor_quotes),
                    invoices=list(sponsor_invoices),
                    credit_notes=list(sponsor_notes),
                    totals=self.sponsor_totals(
                        sponsor.budget, sponsor_quotes, sponsor_invoices, sponsor_notes
                    ),
                )
            )

        totals = SessionTotals(
            budget=sum_cents(p.totals.budget for p in pipelines),
            total_quoted=sum_cents(p.totals.total_quoted for p in pipelines),
            total_invoiced=sum_cents(p.totals.total_invoiced for p in pipelines),
            total_paid=sum_cents(p.totals.total_paid for p in pipelines),
            total_credited=sum_cents(p.totals.total_credited for p in pipelines),
        )
        unattributed = loose_quotes + loose_invoices + loose_notes

        logger.debug(
            "billing_pipeline_built",
            extra={
                "session_id": session_id,
                "sponsor_count": len(pipelines),
                "unattributed_documents": unattributed,
                "total_invoiced": str(totals.total_invoiced),
            },
        )

        return SessionPipeline(
            session_id=session_id,
            sponsors=pipelines,
            totals=totals,
            unattributed_documents=unattributed,
        )


def build_session_pipeline(
    session_id: str,
    sponsors: Sequence[Sponsor],
    quotes: Sequence[Quote] = (),
    invoices: Sequence[Invoice] = (),
    credit_notes: Sequence[CreditNote] = (),
) -> SessionPipeline:
    """Aggregate a session pipeline with the default configuration."""
    return BillingPipelineAggregator().aggregate(
        session_id, sponsors, quotes, invoices, credit_notes
    )
