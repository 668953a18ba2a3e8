# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Decimal money helpers shared by every aggregator.

Amounts are rounded half-up to the cent after every accumulation step, not
only on the grand total. Line amounts are persisted already rounded and later
summed on their own, so a total built from unrounded lines would drift from
the sum of the stored lines.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, Field

from training_ledger.errors import NonPositiveBalanceError
from training_ledger.types import ZERO, InvoiceStatus, money_or_zero

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]

Money = Annotated[Decimal, BeforeValidator(money_or_zero)]


def to_decimal(value: Number | None) -> Decimal:
    """Convert a number to Decimal. ``None`` becomes ``ZERO``."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps the shortest repr of a float, so 0.1 stays 0.1
    return Decimal(str(value))


def round_cents(value: Number) -> Decimal:
    """Round half-up to two decimals."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_amount(quantity: Number, unit_price_excl_tax: Number) -> Decimal:
    """Amount before tax of one document line, rounded to the cent."""
    return round_cents(to_decimal(quantity) * to_decimal(unit_price_excl_tax))


def line_tax(amount: Number, tax_rate_percent: Number) -> Decimal:
    """Tax on an already rounded line amount, rounded to the cent."""
    return round_cents(to_decimal(amount) * to_decimal(tax_rate_percent) / HUNDRED)


def sum_cents(values: Iterable[Any]) -> Decimal:
    """Sum amounts, rounding to the cent after each addition."""
    total = ZERO
    for value in values:
        total = round_cents(total + round_cents(to_decimal(value)))
    return total


# ─── Document totals ──────────────────────────────────────────────────────────


class DocumentLine(BaseModel, frozen=True):
    """One priced line of a quote, invoice or credit note."""

    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    unit_price_excl_tax: Money = ZERO
    tax_rate_percent: Money = Field(default=ZERO, ge=0)


class DocumentTotals(BaseModel, frozen=True):
    """Totals of a billing document. ``total_incl_tax`` is always excl + tax."""

    total_excl_tax: Decimal
    total_tax: Decimal
    total_incl_tax: Decimal


def document_totals(lines: Iterable[DocumentLine]) -> DocumentTotals:
    """
    Compute document totals from its lines.

    Each line amount and each line tax is rounded before it is added to the
    running totals, and the running totals are rounded after every step.
    """
    total_excl_tax = ZERO
    total_tax = ZERO
    for line in lines:
        amount = line_amount(line.quantity, line.unit_price_excl_tax)
        total_excl_tax = round_cents(total_excl_tax + amount)
        total_tax = round_cents(total_tax + line_tax(amount, line.tax_rate_percent))

    return DocumentTotals(
        total_excl_tax=total_excl_tax,
        total_tax=total_tax,
        total_incl_tax=total_excl_tax + total_tax,
    )


# ─── Down payment / balance ───────────────────────────────────────────────────


def down_payment_amount(budget: Number, percent: Number) -> Decimal:
    """Amount of a down-payment invoice worth ``percent`` of a sponsor budget."""
    return round_cents(to_decimal(budget) * to_decimal(percent) / HUNDRED)


def balance_amount(budget: Number, already_invoiced: Number) -> Decimal:
    """
    Amount left to invoice on a sponsor budget.

    Raises:
        NonPositiveBalanceError: If nothing (or less than nothing) is left.
    """
    budget_value = to_decimal(budget)
    invoiced = to_decimal(already_invoiced)
    amount = round_cents(budget_value - invoiced)
    if amount <= 0:
        raise NonPositiveBalanceError(budget=budget_value, already_invoiced=invoiced)
    return amount


def payment_status(
    total_incl_tax: Number,
    amount_paid: Number,
    current: InvoiceStatus = InvoiceStatus.SENT,
) -> InvoiceStatus:
    """
    Derive an invoice status from the amount collected so far.

    An invoice with nothing paid keeps its current status.
    """
    paid = round_cents(amount_paid)
    if paid <= 0:
        return current
    if paid >= round_cents(total_incl_tax):
        return InvoiceStatus.PAID
    return InvoiceStatus.PARTIALLY_PAID
