from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from signoff.api.deps import get_db
from signoff.schemas.review import EventBatch, EventList, EventUpdate
from signoff.services import events as event_service

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=EventList)
def list_events(db: Session = Depends(get_db)) -> dict:
    return {"events": event_service.events.list(db)}


@router.post("")
def save_events(payload: EventBatch, db: Session = Depends(get_db)) -> dict:
    event_service.events.save(db, payload.events)
    return {"success": True}


@router.patch("/{event_id}")
def update_event(
    event_id: str, payload: EventUpdate, db: Session = Depends(get_db)
) -> dict:
    event_service.events.update(db, event_id, payload)
    return {"success": True}


@router.delete("/{event_id}")
def delete_event(event_id: str, db: Session = Depends(get_db)) -> dict:
    event_service.events.delete(db, event_id)
    return {"success": True}
