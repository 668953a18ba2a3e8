# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
session_billing.py

Demonstrates the billing pipeline of one training session:
  1. Two sponsors share the session (a company paying directly and an
     employer whose financing body is subrogated).
  2. Quotes, invoices and a credit note are attributed to them.
  3. Per-sponsor and session totals are printed.

Run with:  python examples/session_billing.py
(from the repository root with training-ledger installed)
"""

from decimal import Decimal

from training_ledger import (
    BillingPipelineAggregator,
    CreditNote,
    Invoice,
    Quote,
    Sponsor,
    balance_amount,
    down_payment_amount,
)

# ─── Setup ────────────────────────────────────────────────────────────────────

sponsors = [
    Sponsor(
        id="sp-acme",
        company={"id": "co-acme", "name": "Acme Industries"},
        contact=[{"id": "ct-1", "first_name": "Camille", "last_name": "Martin"}],
        budget=Decimal("10000"),
    ),
    Sponsor(
        id="sp-globex",
        company={"id": "co-globex", "name": "Globex"},
        financer={"id": "fin-1", "name": "Skills Fund"},
        subrogation_mode="full_subrogation",
        bill_company=False,
        bill_financer=True,
        budget=Decimal("4200"),
    ),
]

down_payment = down_payment_amount(Decimal("10000"), 30)

quotes = [
    Quote(id="q-1", display_number="Q-2026-001", sponsor_id="sp-acme", total_incl_tax=Decimal("10000")),
    Quote(id="q-2", display_number="Q-2026-002", sponsor_id="sp-globex", total_incl_tax=Decimal("4200")),
]
invoices = [
    Invoice(
        id="inv-1",
        display_number="F-2026-001",
        sponsor_id="sp-acme",
        invoice_type="down_payment",
        down_payment_percent=30,
        total_incl_tax=down_payment,
        amount_paid=down_payment,
    ),
    Invoice(
        id="inv-2",
        display_number="F-2026-002",
        sponsor_id="sp-acme",
        invoice_type="standard",
        total_incl_tax=Decimal("3000"),
        amount_paid=Decimal("1000"),
    ),
    Invoice(id="inv-3", display_number="F-2026-003", sponsor_id="sp-globex", total_incl_tax=Decimal("4200")),
]
credit_notes = [
    # Linked through the credited invoice only.
    CreditNote(id="cn-1", display_number="AV-2026-001", invoice_id="inv-2", total_incl_tax=Decimal("500")),
]

# ─── Aggregate ────────────────────────────────────────────────────────────────

pipeline = BillingPipelineAggregator().aggregate(
    "session-excel-march",
    sponsors=sponsors,
    quotes=quotes,
    invoices=invoices,
    credit_notes=credit_notes,
)

for entry in pipeline.sponsors:
    totals = entry.totals
    print(f"\n── {entry.sponsor.company_name} ({entry.sponsor.subrogation_mode.value}) ──────────")
    print(f"  Budget               : {totals.budget:>10}")
    print(f"  Quoted               : {totals.total_quoted:>10}")
    print(f"  Invoiced             : {totals.total_invoiced:>10}")
    print(f"  Paid                 : {totals.total_paid:>10}")
    print(f"  Credited             : {totals.total_credited:>10}")
    print(f"  Remaining to invoice : {totals.remaining_to_invoice:>10}")
    print(f"  Remaining to collect : {totals.remaining_to_collect:>10}")

print("\n── Session ───────────────────────────────────────────")
print(f"  Budget   : {pipeline.totals.budget}")
print(f"  Invoiced : {pipeline.totals.total_invoiced}")
print(f"  Paid     : {pipeline.totals.total_paid}")
print(f"  Credited : {pipeline.totals.total_credited}")

# ─── Balance invoice for Acme ─────────────────────────────────────────────────

acme = pipeline.sponsors[0].totals
print(f"\nBalance invoice for Acme: {balance_amount(acme.budget, acme.total_invoiced)}")
