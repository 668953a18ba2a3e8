# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from decimal import Decimal


class TrainingLedgerError(Exception):
    """Base class for all training-ledger errors."""

    def __init__(self, message: str, code: str = "TRAINING_LEDGER_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidThresholdError(TrainingLedgerError):
    """Raised when a vigilance threshold falls outside 1..100."""

    def __init__(self, value: int | float | Decimal) -> None:
        super().__init__(
            f"Vigilance threshold must be between 1 and 100; got {value}.",
            code="INVALID_THRESHOLD",
        )
        self.value = value


class AllocationExceedsPlanError(TrainingLedgerError):
    """
    Raised when an agency allocation would push the allocated sum above the
    plan total.

    Attributes:
        plan_id: The plan being distributed.
        requested_total: Sum of allocations including the new one.
        plan_total: The plan's allocated total.
    """

    def __init__(self, plan_id: str, requested_total: Decimal, plan_total: Decimal) -> None:
        super().__init__(
            f"Plan '{plan_id}': allocations would total {requested_total:.2f} "
            f"but the plan budget is {plan_total:.2f}.",
            code="ALLOCATION_EXCEEDS_PLAN",
        )
        self.plan_id = plan_id
        self.requested_total = requested_total
        self.plan_total = plan_total


class NonPositiveBalanceError(TrainingLedgerError):
    """Raised when a balance invoice would carry a zero or negative amount."""

    def __init__(self, budget: Decimal, already_invoiced: Decimal) -> None:
        super().__init__(
            f"Balance amount is zero or negative (budget: {budget:.2f}, "
            f"already invoiced: {already_invoiced:.2f}).",
            code="NON_POSITIVE_BALANCE",
        )
        self.budget = budget
        self.already_invoiced = already_invoiced


class ConfigurationError(TrainingLedgerError):
    """Raised when the engine is misconfigured."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")
