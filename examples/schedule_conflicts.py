# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
schedule_conflicts.py

Checks a proposed slot against a trainer's and a room's existing bookings
before saving it, then prints the day's planning figures.

Run with:  python examples/schedule_conflicts.py
(from the repository root with training-ledger installed)
"""

import datetime as dt

from training_ledger import ProposedSlot, ScheduleConflictDetector, TimeSlot, planning_stats

day = dt.date(2026, 3, 10)

existing = [
    TimeSlot(
        id="sl-1", session_id="s-excel", session_name="Excel basics", date=day,
        start=dt.time(9, 0), end=dt.time(12, 0),
        trainer_id="tr-ana", trainer={"id": "tr-ana", "first_name": "Ana", "last_name": "Diaz"},
        room_id="rm-rivoli", room={"id": "rm-rivoli", "name": "Salle Rivoli"},
    ),
    TimeSlot(
        id="sl-2", session_id="s-safety", session_name="Fire safety", date=day,
        start=dt.time(13, 30), end=dt.time(17, 0),
        trainer_id="tr-leo", room_id="rm-rivoli", room={"id": "rm-rivoli", "name": "Salle Rivoli"},
    ),
]

detector = ScheduleConflictDetector()

for proposal in [
    ProposedSlot(date=day, start=dt.time(12, 0), end=dt.time(13, 30), trainer_id="tr-ana", room_id="rm-rivoli"),
    ProposedSlot(date=day, start=dt.time(11, 0), end=dt.time(14, 0), trainer_id="tr-ana", room_id="rm-rivoli"),
]:
    conflicts = detector.detect(proposal, existing)
    window = f"{proposal.start:%H:%M}-{proposal.end:%H:%M}"
    if not conflicts:
        print(f"{window}: free")
        continue
    print(f"{window}: {len(conflicts)} conflict(s)")
    for conflict in conflicts:
        print(f"  - {conflict.describe()}")

stats = planning_stats(existing)
print(
    f"\n{stats.total_slots} slots, {stats.total_hours} h, "
    f"{stats.total_sessions} sessions, {stats.total_trainers} trainers"
)
