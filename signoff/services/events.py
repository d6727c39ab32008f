from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from signoff.models.review import Event
from signoff.schemas.review import EventIn, EventUpdate
from signoff.services.common import apply_update, get_or_404, require_batch, upsert_all

logger = logging.getLogger(__name__)


class Events:
    @staticmethod
    def list(db: Session) -> list[Event]:
        return db.scalars(select(Event).order_by(Event.start_date.asc())).all()

    @staticmethod
    def save(db: Session, events: list[EventIn]) -> int:
        require_batch(events, "events")
        count = upsert_all(db, Event, [event.model_dump() for event in events])
        logger.info("Saved %d events", count)
        return count

    @staticmethod
    def update(db: Session, event_id: str, payload: EventUpdate) -> Event:
        event = get_or_404(db, Event, event_id, "Event")
        apply_update(event, payload.model_dump(exclude_unset=True))
        db.flush()
        logger.info("Updated event %s", event.id)
        return event

    @staticmethod
    def delete(db: Session, event_id: str) -> None:
        # Assets and groups keep their event_id; the dashboard shows them unassigned.
        event = get_or_404(db, Event, event_id, "Event")
        db.delete(event)
        db.flush()
        logger.info("Deleted event %s", event_id)


events = Events()
