import logging
from collections.abc import Generator

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from signoff.config import settings
from signoff.db import SessionLocal
from signoff.services.role import is_allowed

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    if header.startswith("Bearer "):
        return header[7:].strip()
    return ""


def require_user(request: Request) -> dict:
    """Resolve the caller's email from a bearer token, or reject with 401."""
    token = _bearer_token(request)
    email = settings.api_tokens.get(token) if token else None
    if email is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not is_allowed(email):
        logger.info("Blocked non-team email %s", email)
        raise HTTPException(status_code=401, detail="Unauthorized")
    request.state.user_email = email
    return {"email": email}
