"""Typed records exchanged with the record store."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecordKind(str, Enum):
    """Record kinds held by the record store."""

    LUNCH_PLACE = "lunch_place"
    LUNCH_PROPOSAL = "lunch_proposal"


class RecordRef(BaseModel):
    """Typed reference to another stored record."""

    model_config = ConfigDict(frozen=True)

    kind: RecordKind
    id: str = Field(min_length=1)


class User(BaseModel):
    """Internal user mapped from an external chat user id."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str


class Place(BaseModel):
    """Stored lunch place."""

    kind: Literal[RecordKind.LUNCH_PLACE] = RecordKind.LUNCH_PLACE
    id: str | None = None
    name: str = Field(min_length=1)
    created_at: datetime | None = None

    def ref(self) -> RecordRef:
        if self.id is None:
            raise ValueError("Unsaved lunch place cannot be referenced.")
        return RecordRef(kind=RecordKind.LUNCH_PLACE, id=self.id)


class Proposal(BaseModel):
    """Stored lunch proposal."""

    kind: Literal[RecordKind.LUNCH_PROPOSAL] = RecordKind.LUNCH_PROPOSAL
    id: str | None = None
    place: RecordRef
    channel: str | None = None
    created_at: datetime | None = None

    @field_validator("place")
    @classmethod
    def _place_reference_kind(cls, value: RecordRef) -> RecordRef:
        if value.kind is not RecordKind.LUNCH_PLACE:
            raise ValueError("Proposal must reference a lunch place.")
        return value


Record = Place | Proposal
