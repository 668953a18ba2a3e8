# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from training_ledger.types import Modality, PartyRef, PersonRef, one_or_none


class TimeSlot(BaseModel):
    """
    A dated [start, end) interval of a session, optionally staffed with a
    trainer and a room.
    """

    id: str
    session_id: str
    session_name: str = ""
    organization_id: Optional[str] = None
    date: dt.date
    start: dt.time
    end: dt.time
    trainer_id: Optional[str] = None
    room_id: Optional[str] = None
    trainer: Optional[PersonRef] = None
    room: Optional[PartyRef] = None
    modality: Modality = Modality.IN_PERSON
    duration_minutes: Optional[int] = Field(default=None, ge=0)

    @field_validator("trainer", "room", mode="before")
    @classmethod
    def collapse_embedded(cls, value: object) -> object:
        return one_or_none(value)

    @property
    def trainer_key(self) -> Optional[str]:
        if self.trainer_id is not None:
            return self.trainer_id
        return self.trainer.id if self.trainer else None

    @property
    def room_key(self) -> Optional[str]:
        if self.room_id is not None:
            return self.room_id
        return self.room.id if self.room else None

    @property
    def minutes(self) -> int:
        """Stored duration, else the length of the interval."""
        if self.duration_minutes is not None:
            return self.duration_minutes
        start = self.start.hour * 60 + self.start.minute
        end = self.end.hour * 60 + self.end.minute
        return max(0, end - start)


class ProposedSlot(BaseModel, frozen=True):
    """
    A slot about to be saved. ``exclude_slot_id`` names the slot being edited
    so that re-saving it does not collide with its own stored version.
    """

    date: dt.date
    start: dt.time
    end: dt.time
    trainer_id: Optional[str] = None
    room_id: Optional[str] = None
    exclude_slot_id: Optional[str] = None
    organization_id: Optional[str] = None


class ConflictKind(str, Enum):
    TRAINER = "trainer"
    ROOM = "room"


class SlotConflict(BaseModel, frozen=True):
    """An existing booking that overlaps a proposed slot for the same trainer or room."""

    kind: ConflictKind
    party_id: str
    party_name: str
    slot_id: str
    session_id: str
    session_name: str
    date: dt.date
    start: dt.time
    end: dt.time

    def describe(self) -> str:
        return (
            f"{self.kind.value} {self.party_name} is already booked on session "
            f"{self.session_name or self.session_id} from "
            f"{self.start:%H:%M}-{self.end:%H:%M}"
        )
