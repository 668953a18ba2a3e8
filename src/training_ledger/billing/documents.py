# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from training_ledger.money import Money
from training_ledger.types import (
    ZERO,
    CreditNoteStatus,
    InvoiceStatus,
    InvoiceType,
    PartyRef,
    PersonRef,
    QuoteStatus,
    SubrogationMode,
    one_or_none,
)

# ─── Sponsor ──────────────────────────────────────────────────────────────────


class Sponsor(BaseModel):
    """
    Funding relationship for one session.

    References at most one company, one client contact and one financing
    body. ``amount_company`` / ``amount_financer`` only matter in partial
    subrogation, where the budget is split between the two payers.
    """

    id: str
    session_id: Optional[str] = None
    company: Optional[PartyRef] = None
    contact: Optional[PersonRef] = None
    financer: Optional[PartyRef] = None
    budget: Money = ZERO
    subrogation_mode: Optional[SubrogationMode] = None
    amount_company: Money = ZERO
    amount_financer: Money = ZERO
    bill_company: bool = True
    bill_financer: bool = False
    workflow_status: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("company", "contact", "financer", mode="before")
    @classmethod
    def collapse_embedded(cls, value: object) -> object:
        return one_or_none(value)

    @field_validator("bill_company", mode="before")
    @classmethod
    def bill_company_defaults_true(cls, value: object) -> object:
        return True if value is None else value

    @field_validator("bill_financer", mode="before")
    @classmethod
    def bill_financer_defaults_false(cls, value: object) -> object:
        return False if value is None else value

    @field_validator("created_at")
    @classmethod
    def naive_means_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


# ─── Billing documents ────────────────────────────────────────────────────────


class BillingDocument(BaseModel):
    """Shape shared by quotes, invoices and credit notes."""

    id: str
    display_number: str = ""
    issued_on: Optional[date] = None
    total_excl_tax: Money = ZERO
    total_incl_tax: Money = ZERO
    sponsor_id: Optional[str] = None
    session_id: Optional[str] = None
    subject: Optional[str] = None


class Quote(BillingDocument):
    status: QuoteStatus = QuoteStatus.DRAFT


class Invoice(BillingDocument):
    status: InvoiceStatus = InvoiceStatus.DRAFT
    invoice_type: InvoiceType = InvoiceType.STANDARD
    amount_paid: Money = ZERO
    down_payment_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)

    @field_validator("invoice_type", mode="before")
    @classmethod
    def invoice_type_defaults_standard(cls, value: object) -> object:
        return InvoiceType.STANDARD if value is None else value

    @field_validator("down_payment_percent", mode="before")
    @classmethod
    def zero_percent_means_none(cls, value: object) -> object:
        # a 0 % down payment is stored by the data layer for plain invoices
        if value in (0, "0", None, ""):
            return None
        return value


class CreditNote(BillingDocument):
    status: CreditNoteStatus = CreditNoteStatus.DRAFT
    invoice_id: Optional[str] = None
    reason: Optional[str] = None
