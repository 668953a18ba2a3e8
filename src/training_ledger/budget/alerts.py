# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Threshold-based budget alerts.

Every row is judged on its own: an agency alert never suppresses or
escalates the global row, so an agency and the enterprise can both be
flagged by the same spend. Alerts are recomputed on each read and never
stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from training_ledger.budget.views import AgencyBudgetRow, AlertKind, AlertScope, BudgetAlert

logger = logging.getLogger("training_ledger.budget")


def evaluate_row(row: AgencyBudgetRow, threshold: int) -> Optional[BudgetAlert]:
    """
    Judge one consolidation row against a vigilance threshold.

    Returns:
        An overspend alert when ``remaining < 0``, else a vigilance alert
        when consumption reaches ``threshold`` percent, else None. The
        threshold is checked against the exact ratio; the rounded
        percentage is only reported on the alert.
    """
    if row.remaining < 0:
        kind = AlertKind.OVERSPEND
    elif row.allocated > 0 and row.engaged * 100 >= threshold * row.allocated:
        kind = AlertKind.VIGILANCE
    else:
        return None

    return BudgetAlert(
        kind=kind,
        scope=AlertScope.ENTERPRISE_GLOBAL if row.scope == "global" else AlertScope.AGENCY,
        agency_id=row.agency_id,
        entity_name=row.agency_name,
        allocated=row.allocated,
        engaged=row.engaged,
        remaining=row.remaining,
        percentage=row.consumption_percent,
        threshold=threshold,
    )


def evaluate_alerts(rows: Iterable[AgencyBudgetRow], threshold: int) -> list[BudgetAlert]:
    """Evaluate every row independently, keeping row order."""
    alerts: list[BudgetAlert] = []
    for row in rows:
        alert = evaluate_row(row, threshold)
        if alert is not None:
            alerts.append(alert)
    return alerts


def log_budget_alerts(
    alerts: Iterable[BudgetAlert],
    enterprise_id: str,
    fiscal_year: int,
) -> int:
    """
    Write each alert to the ``training_ledger.budget`` logger at WARNING.

    Returns:
        The number of alerts logged.
    """
    count = 0
    for alert in alerts:
        logger.warning(
            "budget_alert_triggered",
            extra={
                "enterprise_id": enterprise_id,
                "fiscal_year": fiscal_year,
                "alert_kind": alert.kind.value,
                "alert_scope": alert.scope.value,
                "agency_id": alert.agency_id,
                "entity_name": alert.entity_name,
                "allocated": str(alert.allocated),
                "engaged": str(alert.engaged),
                "percentage": str(alert.percentage),
                "threshold": alert.threshold,
            },
        )
        count += 1
    return count
