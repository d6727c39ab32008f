from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from signoff.api.deps import get_db
from signoff.schemas.review import AssetBatch, AssetList, AssetUpdate
from signoff.services import assets as asset_service

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("", response_model=AssetList)
def list_assets(db: Session = Depends(get_db)) -> dict:
    return {"assets": asset_service.assets.list(db)}


@router.post("")
def save_assets(payload: AssetBatch, db: Session = Depends(get_db)) -> dict:
    asset_service.assets.save(db, payload.assets)
    return {"success": True}


@router.patch("/{asset_id}")
def update_asset(
    asset_id: str, payload: AssetUpdate, db: Session = Depends(get_db)
) -> dict:
    asset_service.assets.update(db, asset_id, payload)
    return {"success": True}


@router.delete("/{asset_id}")
def delete_asset(asset_id: str, db: Session = Depends(get_db)) -> dict:
    asset_service.assets.delete(db, asset_id)
    return {"success": True}
