# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from training_ledger.scheduling.conflicts import (
    ScheduleConflictDetector,
    detect_conflicts,
    intervals_overlap,
)
from training_ledger.scheduling.layout import (
    PlanningStats,
    PositionedSlot,
    group_overlapping,
    planning_stats,
    position_slots,
)
from training_ledger.scheduling.slots import (
    ConflictKind,
    ProposedSlot,
    SlotConflict,
    TimeSlot,
)

__all__ = [
    "ConflictKind",
    "PlanningStats",
    "PositionedSlot",
    "ProposedSlot",
    "ScheduleConflictDetector",
    "SlotConflict",
    "TimeSlot",
    "detect_conflicts",
    "group_overlapping",
    "intervals_overlap",
    "planning_stats",
    "position_slots",
]
