from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from signoff.models.review import ActivityLog
from signoff.schemas.review import ActivityIn
from signoff.services.common import require_batch, upsert_all

logger = logging.getLogger(__name__)


class Activity:
    @staticmethod
    def list(db: Session) -> list[ActivityLog]:
        return db.scalars(
            select(ActivityLog).order_by(ActivityLog.timestamp.desc())
        ).all()

    @staticmethod
    def save(db: Session, entries: list[ActivityIn]) -> int:
        require_batch(entries, "activity")
        count = upsert_all(db, ActivityLog, [entry.model_dump() for entry in entries])
        logger.info("Saved %d activity entries", count)
        return count


activity = Activity()
