# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Double-booking detection for trainers and rooms.

The check is advisory: it reports overlapping bookings against the slots the
caller fetched and never blocks a save. Two callers working from the same
snapshot can both pass the check.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from training_ledger.config import EngineConfig, SchedulingConfig
from training_ledger.scheduling.slots import (
    ConflictKind,
    ProposedSlot,
    SlotConflict,
    TimeSlot,
)

logger = logging.getLogger("training_ledger.scheduling")


def intervals_overlap(start_a: dt.time, end_a: dt.time, start_b: dt.time, end_b: dt.time) -> bool:
    """Half-open overlap: [a) and [b) overlap iff start_a < end_b and start_b < end_a."""
    return start_a < end_b and start_b < end_a


def _slot_order(slot: TimeSlot) -> tuple[dt.time, dt.time, str]:
    return (slot.start, slot.end, slot.id)


class ScheduleConflictDetector:
    """
    Reports the existing slots that would double-book a trainer or a room.

    Each resource type is opt-in: without a trainer the trainer scan is
    skipped, and likewise for the room. Trainer conflicts come first, then
    room conflicts, each ordered by (start, end, slot id).

    Usage::

        detector = ScheduleConflictDetector()
        conflicts = detector.detect(
            ProposedSlot(date=day, start=nine, end=noon, trainer_id="t-1"),
            existing_slots,
        )
    """

    def __init__(self, config: EngineConfig | SchedulingConfig | None = None) -> None:
        if isinstance(config, EngineConfig):
            config = config.scheduling
        self._config = config or SchedulingConfig()

    def detect(
        self,
        proposal: ProposedSlot,
        existing: Iterable[TimeSlot],
    ) -> list[SlotConflict]:
        """
        Scan existing slots for bookings overlapping ``proposal``.

        Args:
            proposal: The slot about to be saved.
            existing: The organisation's slots; other dates, other
                      organisations and the edited slot itself are skipped.

        Returns:
            One SlotConflict per overlapping booking. Empty when the proposal
            names neither a trainer nor a room.
        """
        if proposal.trainer_id is None and proposal.room_id is None:
            return []

        candidates = [
            slot
            for slot in existing
            if slot.date == proposal.date
            and slot.id != proposal.exclude_slot_id
            and (
                proposal.organization_id is None
                or slot.organization_id is None
                or slot.organization_id == proposal.organization_id
            )
            and intervals_overlap(proposal.start, proposal.end, slot.start, slot.end)
        ]

        conflicts: list[SlotConflict] = []
        if proposal.trainer_id is not None:
            conflicts.extend(
                self._scan(
                    candidates,
                    ConflictKind.TRAINER,
                    proposal.trainer_id,
                    key=lambda slot: slot.trainer_key,
                    name=self._trainer_name,
                )
            )
        if proposal.room_id is not None:
            conflicts.extend(
                self._scan(
                    candidates,
                    ConflictKind.ROOM,
                    proposal.room_id,
                    key=lambda slot: slot.room_key,
                    name=self._room_name,
                )
            )

        if conflicts:
            logger.info(
                "schedule_conflicts_detected",
                extra={
                    "date": proposal.date.isoformat(),
                    "trainer_id": proposal.trainer_id,
                    "room_id": proposal.room_id,
                    "conflict_count": len(conflicts),
                },
            )
        return conflicts

    # ─── Private helpers ──────────────────────────────────────────────────────

    def _scan(
        self,
        candidates: Sequence[TimeSlot],
        kind: ConflictKind,
        party_id: str,
        key: Callable[[TimeSlot], Optional[str]],
        name: Callable[[TimeSlot], str],
    ) -> list[SlotConflict]:
        matches = sorted((slot for slot in candidates if key(slot) == party_id), key=_slot_order)
        return [
            SlotConflict(
                kind=kind,
                party_id=party_id,
                party_name=name(slot),
                slot_id=slot.id,
                session_id=slot.session_id,
                session_name=slot.session_name,
                date=slot.date,
                start=slot.start,
                end=slot.end,
            )
            for slot in matches
        ]

    def _trainer_name(self, slot: TimeSlot) -> str:
        if slot.trainer is not None and slot.trainer.display_name:
            return slot.trainer.display_name
        return self._config.trainer_fallback_label

    def _room_name(self, slot: TimeSlot) -> str:
        if slot.room is not None and slot.room.name:
            return slot.room.name
        return self._config.room_fallback_label


def detect_conflicts(proposal: ProposedSlot, existing: Iterable[TimeSlot]) -> list[SlotConflict]:
    """Run the conflict scan with the default configuration."""
    return ScheduleConflictDetector().detect(proposal, existing)
