from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from signoff.api.deps import get_db
from signoff.schemas.review import ActivityBatch, ActivityList
from signoff.services import activity as activity_service

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=ActivityList)
def list_activity(db: Session = Depends(get_db)) -> dict:
    return {"activity": activity_service.activity.list(db)}


@router.post("")
def save_activity(payload: ActivityBatch, db: Session = Depends(get_db)) -> dict:
    activity_service.activity.save(db, payload.activity)
    return {"success": True}
