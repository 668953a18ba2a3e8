# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for trainer and room double-booking detection."""

from __future__ import annotations

import datetime as dt
import logging

import pytest

from training_ledger.config import EngineConfig, SchedulingConfig
from training_ledger.scheduling.conflicts import (
    ScheduleConflictDetector,
    detect_conflicts,
    intervals_overlap,
)
from training_ledger.scheduling.slots import ConflictKind, ProposedSlot, TimeSlot

DAY = dt.date(2026, 3, 10)


def _t(value: str) -> dt.time:
    return dt.time.fromisoformat(value)


def _slot(
    slot_id: str,
    start: str,
    end: str,
    trainer_id: str | None = "tr-1",
    room_id: str | None = None,
    **extra: object,
) -> TimeSlot:
    return TimeSlot(
        id=slot_id,
        session_id=extra.pop("session_id", "s-1"),
        session_name=extra.pop("session_name", "Excel basics"),
        date=extra.pop("date", DAY),
        start=_t(start),
        end=_t(end),
        trainer_id=trainer_id,
        room_id=room_id,
        **extra,
    )


def _proposal(start: str, end: str, **fields: object) -> ProposedSlot:
    return ProposedSlot(date=fields.pop("date", DAY), start=_t(start), end=_t(end), **fields)


# ---------------------------------------------------------------------------
# TestIntervalsOverlap
# ---------------------------------------------------------------------------


class TestIntervalsOverlap:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (("09:00", "12:00"), ("12:00", "14:00"), False),
            (("09:00", "12:00"), ("11:59", "13:00"), True),
            (("09:00", "12:00"), ("10:00", "11:00"), True),
            (("09:00", "12:00"), ("08:00", "09:00"), False),
            (("09:00", "12:00"), ("09:00", "12:00"), True),
        ],
    )
    def test_half_open(self, a: tuple[str, str], b: tuple[str, str], expected: bool) -> None:
        assert intervals_overlap(_t(a[0]), _t(a[1]), _t(b[0]), _t(b[1])) is expected
        assert intervals_overlap(_t(b[0]), _t(b[1]), _t(a[0]), _t(a[1])) is expected


# ---------------------------------------------------------------------------
# TestTrainerConflicts
# ---------------------------------------------------------------------------


class TestTrainerConflicts:
    def test_touching_slots_do_not_conflict(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00")]
        assert detector.detect(_proposal("12:00", "14:00", trainer_id="tr-1"), existing) == []

    def test_one_minute_overlap_conflicts(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", trainer={"id": "tr-1", "first_name": "Ana", "last_name": "Diaz"})]

        conflicts = detector.detect(_proposal("11:59", "13:00", trainer_id="tr-1"), existing)

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.kind == ConflictKind.TRAINER
        assert conflict.party_id == "tr-1"
        assert conflict.party_name == "Ana Diaz"
        assert conflict.slot_id == "sl-1"
        assert conflict.session_name == "Excel basics"
        assert conflict.describe() == "trainer Ana Diaz is already booked on session Excel basics from 09:00-12:00"

    def test_edited_slot_is_excluded(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00")]
        proposal = _proposal("09:30", "12:30", trainer_id="tr-1", exclude_slot_id="sl-1")
        assert detector.detect(proposal, existing) == []

    def test_other_trainer_is_free(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", trainer_id="tr-2")]
        assert detector.detect(_proposal("10:00", "11:00", trainer_id="tr-1"), existing) == []

    def test_other_date_is_ignored(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", date=dt.date(2026, 3, 11))]
        assert detector.detect(_proposal("10:00", "11:00", trainer_id="tr-1"), existing) == []

    def test_other_organisation_is_ignored(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", organization_id="org-b")]
        proposal = _proposal("10:00", "11:00", trainer_id="tr-1", organization_id="org-a")
        assert detector.detect(proposal, existing) == []

    def test_trainer_from_embedded_row(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", trainer_id=None, trainer=[{"id": "tr-1"}])]

        conflicts = detector.detect(_proposal("10:00", "11:00", trainer_id="tr-1"), existing)

        assert [c.party_name for c in conflicts] == ["Trainer"]

    def test_conflicts_are_ordered_by_start(self, detector: ScheduleConflictDetector) -> None:
        existing = [
            _slot("sl-c", "13:00", "15:00"),
            _slot("sl-a", "08:00", "10:00"),
            _slot("sl-b", "09:30", "13:30"),
        ]
        conflicts = detector.detect(_proposal("09:00", "14:00", trainer_id="tr-1"), existing)
        assert [c.slot_id for c in conflicts] == ["sl-a", "sl-b", "sl-c"]


# ---------------------------------------------------------------------------
# TestRoomConflicts
# ---------------------------------------------------------------------------


class TestRoomConflicts:
    def test_room_conflict_with_name(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "14:00", "17:00", trainer_id=None, room_id="rm-1",
                          room={"id": "rm-1", "name": "Salle Rivoli"})]

        conflicts = detector.detect(_proposal("16:00", "18:00", room_id="rm-1"), existing)

        assert [(c.kind, c.party_name) for c in conflicts] == [(ConflictKind.ROOM, "Salle Rivoli")]

    def test_trainer_conflicts_come_before_room_conflicts(
        self, detector: ScheduleConflictDetector
    ) -> None:
        existing = [
            _slot("sl-room", "08:00", "10:00", trainer_id="tr-9", room_id="rm-1"),
            _slot("sl-trainer", "09:00", "11:00", trainer_id="tr-1", room_id="rm-2"),
        ]

        conflicts = detector.detect(
            _proposal("09:00", "12:00", trainer_id="tr-1", room_id="rm-1"), existing
        )

        assert [(c.kind, c.slot_id) for c in conflicts] == [
            (ConflictKind.TRAINER, "sl-trainer"),
            (ConflictKind.ROOM, "sl-room"),
        ]

    def test_same_slot_can_conflict_twice(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", trainer_id="tr-1", room_id="rm-1")]
        conflicts = detector.detect(
            _proposal("10:00", "11:00", trainer_id="tr-1", room_id="rm-1"), existing
        )
        assert [c.kind for c in conflicts] == [ConflictKind.TRAINER, ConflictKind.ROOM]

    def test_room_fallback_label_from_config(self) -> None:
        detector = ScheduleConflictDetector(
            EngineConfig(scheduling=SchedulingConfig(room_fallback_label="Salle"))
        )
        existing = [_slot("sl-1", "09:00", "12:00", trainer_id=None, room_id="rm-1")]
        conflicts = detector.detect(_proposal("10:00", "11:00", room_id="rm-1"), existing)
        assert conflicts[0].party_name == "Salle"


# ---------------------------------------------------------------------------
# TestDetectorEdges
# ---------------------------------------------------------------------------


class TestDetectorEdges:
    def test_no_trainer_no_room_means_no_check(self, detector: ScheduleConflictDetector) -> None:
        existing = [_slot("sl-1", "09:00", "12:00", trainer_id=None, room_id=None)]
        assert detector.detect(_proposal("09:00", "12:00"), existing) == []

    def test_empty_schedule(self) -> None:
        assert detect_conflicts(_proposal("09:00", "12:00", trainer_id="tr-1"), []) == []

    def test_conflicts_are_logged(
        self, detector: ScheduleConflictDetector, caplog: pytest.LogCaptureFixture
    ) -> None:
        existing = [_slot("sl-1", "09:00", "12:00")]
        with caplog.at_level(logging.INFO, logger="training_ledger.scheduling"):
            detector.detect(_proposal("10:00", "11:00", trainer_id="tr-1"), existing)

        records = [r for r in caplog.records if r.name == "training_ledger.scheduling"]
        assert len(records) == 1
        assert records[0].getMessage() == "schedule_conflicts_detected"
        assert records[0].conflict_count == 1
