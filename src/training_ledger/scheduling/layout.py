# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Planning helpers: summary figures and day-view column layout."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field

from training_ledger.scheduling.slots import TimeSlot

# Horizontal gap kept between side-by-side slots, as a fraction of the column.
SLOT_GAP = 0.02


class PlanningStats(BaseModel, frozen=True):
    total_slots: int = Field(..., ge=0)
    total_hours: Decimal = Field(..., description="Scheduled hours, rounded to 0.1.")
    total_sessions: int = Field(..., ge=0)
    total_trainers: int = Field(..., ge=0)


class PositionedSlot(BaseModel, frozen=True):
    slot: TimeSlot
    left: float = Field(..., ge=0.0, le=1.0)
    width: float


def planning_stats(slots: Iterable[TimeSlot]) -> PlanningStats:
    """Count slots, hours, distinct sessions and distinct trainers."""
    slot_list = list(slots)
    total_minutes = sum(slot.minutes for slot in slot_list)
    hours = (Decimal(total_minutes) / Decimal(60)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return PlanningStats(
        total_slots=len(slot_list),
        total_hours=hours,
        total_sessions=len({slot.session_id for slot in slot_list}),
        total_trainers=len({slot.trainer_key for slot in slot_list if slot.trainer_key}),
    )


def group_overlapping(slots: Sequence[TimeSlot]) -> list[list[TimeSlot]]:
    """
    Split one day's slots into chains of overlapping slots.

    A slot joins the current group when it starts before the latest end seen
    in that group, so touching slots land in separate groups.
    """
    if not slots:
        return []

    ordered = sorted(slots, key=lambda slot: (slot.start, slot.end, slot.id))
    groups: list[list[TimeSlot]] = []
    current = [ordered[0]]
    group_end = ordered[0].end

    for slot in ordered[1:]:
        if slot.start < group_end:
            current.append(slot)
            if slot.end > group_end:
                group_end = slot.end
        else:
            groups.append(current)
            current = [slot]
            group_end = slot.end
    groups.append(current)
    return groups


def position_slots(slots: Sequence[TimeSlot]) -> list[PositionedSlot]:
    """Give each slot of a group an equal share of the day column."""
    positioned: list[PositionedSlot] = []
    for group in group_overlapping(slots):
        width = 1.0 / len(group)
        for index, slot in enumerate(group):
            positioned.append(
                PositionedSlot(slot=slot, left=index * width, width=max(width - SLOT_GAP, 0.0))
            )
    return positioned
