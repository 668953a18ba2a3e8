# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationError

from training_ledger.errors import ConfigurationError
from training_ledger.types import SubrogationMode


class BillingConfig(BaseModel, frozen=True):
    """
    Configuration for the BillingPipelineAggregator.

    Attributes:
        default_subrogation_mode: Mode reported for sponsors whose row carries
            no explicit mode.
    """

    default_subrogation_mode: SubrogationMode = SubrogationMode.DIRECT


class BudgetConfig(BaseModel, frozen=True):
    """
    Configuration for the BudgetConsolidationEngine.

    Attributes:
        default_vigilance_threshold: Percentage of consumption at which a
            vigilance alert fires when the plan record carries no threshold.
        head_office_label: Display name of the synthetic head-office bucket.
        global_label: Display name of the enterprise-wide row.
        unknown_agency_label: Display name for agencies referenced by needs or
            allocations but missing from the agency list.
    """

    default_vigilance_threshold: Annotated[int, Field(ge=1, le=100)] = 80
    head_office_label: Annotated[str, Field(min_length=1)] = "Head office"
    global_label: Annotated[str, Field(min_length=1)] = "Global"
    unknown_agency_label: Annotated[str, Field(min_length=1)] = "Agency"


class SchedulingConfig(BaseModel, frozen=True):
    """
    Configuration for the ScheduleConflictDetector.

    Attributes:
        trainer_fallback_label: Party name used when a conflicting slot has no
            embedded trainer row.
        room_fallback_label: Party name used when a conflicting slot has no
            embedded room row.
    """

    trainer_fallback_label: Annotated[str, Field(min_length=1)] = "Trainer"
    room_fallback_label: Annotated[str, Field(min_length=1)] = "Room"


class EngineConfig(BaseModel, frozen=True):
    """
    Top-level configuration shared by the three engines.

    All fields are optional; sensible defaults are provided for all.

    Example::

        config = EngineConfig(
            budget=BudgetConfig(default_vigilance_threshold=75),
            scheduling=SchedulingConfig(trainer_fallback_label="Formateur"),
        )
        engine = BudgetConsolidationEngine(tariffs, config=config)
    """

    billing: BillingConfig = Field(default_factory=BillingConfig)
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EngineConfig:
        """
        Build a config from a plain mapping (settings file, environment dump).

        Raises:
            ConfigurationError: If any value fails validation.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid engine configuration: {exc}") from exc
