"""Record store client for lunch places and proposals."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lunchbot.errors import ConflictError, StoreError
from lunchbot.models.base import new_record_id
from lunchbot.models.lunch_place import LunchPlace
from lunchbot.models.lunch_proposal import LunchProposal
from lunchbot.schemas.records import Place, Proposal, Record, RecordKind, RecordRef

logger = logging.getLogger(__name__)

AfterSaveHook = Callable[["RecordStore", Record, Record | None], None]

_MODELS: dict[RecordKind, type[LunchPlace] | type[LunchProposal]] = {
    RecordKind.LUNCH_PLACE: LunchPlace,
    RecordKind.LUNCH_PROPOSAL: LunchProposal,
}

# Record field name -> ORM column name, where they differ.
_COLUMN_ALIASES: dict[RecordKind, dict[str, str]] = {
    RecordKind.LUNCH_PLACE: {},
    RecordKind.LUNCH_PROPOSAL: {"place": "place_id"},
}


class AfterSaveHooks:
    """Registry of callbacks run after a record of a given kind is saved."""

    def __init__(self) -> None:
        self._hooks: dict[RecordKind, list[AfterSaveHook]] = defaultdict(list)

    def register(self, kind: RecordKind, hook: AfterSaveHook) -> None:
        self._hooks[kind].append(hook)

    def run(self, store: RecordStore, record: Record, original: Record | None) -> None:
        for hook in self._hooks.get(record.kind, []):
            try:
                hook(store, record, original)
            except Exception:
                logger.exception("After-save hook failed kind=%s id=%s", record.kind.value, record.id)


class RecordStore:
    """Query and save typed records as one internal user."""

    def __init__(self, db: Session, *, user_id: str, hooks: AfterSaveHooks | None = None) -> None:
        self.db = db
        self.user_id = user_id
        self.hooks = hooks

    def query(self, kind: RecordKind, **filters: Any) -> list[Record]:
        """Return records of ``kind`` whose fields equal every filter value."""

        model = _MODELS[kind]
        stmt = select(model)
        for field, value in filters.items():
            column = getattr(model, _COLUMN_ALIASES[kind].get(field, field), None)
            if column is None:
                raise StoreError(f"Unknown {kind.value} field: {field}")
            if isinstance(value, RecordRef):
                value = value.id
            stmt = stmt.where(column == value)
        stmt = stmt.order_by(model.created_at.asc(), model.id.asc())
        try:
            rows = list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Unable to query {kind.value} records") from exc
        return [_to_record(row) for row in rows]

    def save(self, record: Record) -> Record:
        """Insert or update ``record`` and run the after-save hooks for its kind."""

        model = _MODELS[record.kind]
        try:
            row = self.db.get(model, record.id) if record.id else None
            original = _to_record(row) if row is not None else None
            if row is None:
                row = model(id=record.id or new_record_id(), owner_id=self.user_id)
                self.db.add(row)
            _apply(row, record)
            self.db.commit()
            self.db.refresh(row)
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(f"Conflicting {record.kind.value} record") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Unable to save {record.kind.value} record") from exc

        saved = _to_record(row)
        logger.debug("Saved %s %s (update=%s)", saved.kind.value, saved.id, original is not None)
        if self.hooks is not None:
            self.hooks.run(self, saved, original)
        return saved


def _apply(row: LunchPlace | LunchProposal, record: Record) -> None:
    if isinstance(record, Place):
        row.name = record.name
    else:
        row.place_id = record.place.id
        row.channel = record.channel


def _to_record(row: LunchPlace | LunchProposal) -> Record:
    if isinstance(row, LunchPlace):
        return Place(id=row.id, name=row.name, created_at=row.created_at)
    return Proposal(
        id=row.id,
        place=RecordRef(kind=RecordKind.LUNCH_PLACE, id=row.place_id),
        channel=row.channel,
        created_at=row.created_at,
    )
