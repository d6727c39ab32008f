from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from signoff.models.review import ActivityLog, Asset
from signoff.schemas.review import AssetIn, AssetUpdate
from signoff.services.common import apply_update, get_or_404, require_batch, upsert_all
from signoff.services.storage import storage

logger = logging.getLogger(__name__)


def prune_activity(db: Session, subject_type: str, subject_id: str) -> None:
    db.execute(
        delete(ActivityLog).where(
            ActivityLog.subject_type == subject_type,
            ActivityLog.subject_id == subject_id,
        )
    )


class Assets:
    @staticmethod
    def list(db: Session) -> list[Asset]:
        stmt = select(Asset).order_by(Asset.created_at.desc())
        return db.scalars(stmt).all()

    @staticmethod
    def save(db: Session, assets: list[AssetIn]) -> int:
        require_batch(assets, "assets")
        count = upsert_all(db, Asset, [asset.model_dump() for asset in assets])
        logger.info("Saved %d assets", count)
        return count

    @staticmethod
    def update(db: Session, asset_id: str, payload: AssetUpdate) -> Asset:
        asset = get_or_404(db, Asset, asset_id, "Asset")
        apply_update(asset, payload.model_dump(exclude_unset=True))
        db.flush()
        logger.info("Updated asset %s", asset.id)
        return asset

    @staticmethod
    def delete(db: Session, asset_id: str) -> None:
        asset = get_or_404(db, Asset, asset_id, "Asset")
        media_url = asset.media_url
        db.delete(asset)
        prune_activity(db, "asset", asset_id)
        db.flush()
        logger.info("Deleted asset %s", asset_id)
        storage.delete_media(media_url)


assets = Assets()
