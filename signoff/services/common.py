from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

_TIMESTAMPS = ("created_at", "updated_at")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_or_404(db: Session, model, record_id: str, label: str):
    record = db.get(model, record_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def require_batch(records: list, label: str) -> None:
    if not records:
        raise HTTPException(status_code=400, detail=f"No {label} provided.")


def upsert_all(db: Session, model, records: list[dict]) -> int:
    """Insert or overwrite rows by primary key, last write wins."""
    for data in records:
        # Missing timestamps fall back to column defaults or the stored value.
        data = {
            key: value
            for key, value in data.items()
            if value is not None or key not in _TIMESTAMPS
        }
        db.merge(model(**data))
    db.flush()
    return len(records)


def apply_update(record, data: dict) -> None:
    # Every PATCH stamps updated_at, even when no other field was sent.
    data.setdefault("updated_at", None)
    if data["updated_at"] is None:
        data["updated_at"] = utcnow()
    for key, value in data.items():
        setattr(record, key, value)
