# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Shared value types for the training ledger engines.

Money is always ``decimal.Decimal``. Missing amounts are normalised to
``ZERO`` at the model boundary so the engines never coerce ``None`` or
floats on their own.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

ZERO = Decimal("0.00")

# ─── Enumerations ─────────────────────────────────────────────────────────────


class SubrogationMode(str, Enum):
    """Who receives the invoice for a sponsor."""

    DIRECT = "direct"
    FULL_SUBROGATION = "full_subrogation"
    PARTIAL_SUBROGATION = "partial_subrogation"


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    SIGNED = "signed"
    REFUSED = "refused"
    EXPIRED = "expired"
    CONVERTED = "converted"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"


class CreditNoteStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    APPLIED = "applied"


class InvoiceType(str, Enum):
    STANDARD = "standard"
    DOWN_PAYMENT = "down_payment"
    BALANCE = "balance"


class Modality(str, Enum):
    IN_PERSON = "in_person"
    REMOTE = "remote"
    E_LEARNING = "e_learning"
    INTERNSHIP = "internship"


class NeedKind(str, Enum):
    PLAN = "plan"
    ONE_OFF = "one_off"


# ─── Boundary helpers ─────────────────────────────────────────────────────────


def money_or_zero(value: Any) -> Any:
    """Replace a missing amount with ``ZERO``; leave everything else to pydantic."""
    if value is None or value == "":
        return ZERO
    return value


def one_or_none(value: Any) -> Any:
    """
    Collapse a one-or-many embedded relation to a single row.

    The data layer sometimes returns an embedded relation as a list. The
    engines only ever deal with a single optional relation.
    """
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


class PartyRef(BaseModel, frozen=True):
    """A named party embedded in a row (company, financer, room)."""

    id: str
    name: str


class PersonRef(BaseModel, frozen=True):
    """A person embedded in a row (client contact, trainer)."""

    id: str
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
