from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from signoff.api.deps import get_db
from signoff.schemas.review import (
    TextGroupBatch,
    TextGroupList,
    TextGroupUpdate,
    TextItemBatch,
    TextItemList,
    TextItemUpdate,
    TextSectionBatch,
    TextSectionList,
    TextSectionUpdate,
)
from signoff.services import text as text_service

items_router = APIRouter(prefix="/api/text-items", tags=["text-items"])
groups_router = APIRouter(prefix="/api/text-groups", tags=["text-groups"])
sections_router = APIRouter(prefix="/api/text-sections", tags=["text-sections"])


@items_router.get("", response_model=TextItemList)
def list_text_items(db: Session = Depends(get_db)) -> dict:
    return {"items": text_service.text_items.list(db)}


@items_router.post("")
def save_text_items(payload: TextItemBatch, db: Session = Depends(get_db)) -> dict:
    text_service.text_items.save(db, payload.items)
    return {"success": True}


@items_router.patch("/{item_id}")
def update_text_item(
    item_id: str, payload: TextItemUpdate, db: Session = Depends(get_db)
) -> dict:
    text_service.text_items.update(db, item_id, payload)
    return {"success": True}


@items_router.delete("/{item_id}")
def delete_text_item(item_id: str, db: Session = Depends(get_db)) -> dict:
    text_service.text_items.delete(db, item_id)
    return {"success": True}


@groups_router.get("", response_model=TextGroupList)
def list_text_groups(db: Session = Depends(get_db)) -> dict:
    return {"groups": text_service.text_groups.list(db)}


@groups_router.post("")
def save_text_groups(payload: TextGroupBatch, db: Session = Depends(get_db)) -> dict:
    text_service.text_groups.save(db, payload.groups)
    return {"success": True}


@groups_router.patch("/{group_id}")
def update_text_group(
    group_id: str, payload: TextGroupUpdate, db: Session = Depends(get_db)
) -> dict:
    text_service.text_groups.update(db, group_id, payload)
    return {"success": True}


@groups_router.delete("/{group_id}")
def delete_text_group(group_id: str, db: Session = Depends(get_db)) -> dict:
    text_service.text_groups.delete(db, group_id)
    return {"success": True}


@sections_router.get("", response_model=TextSectionList)
def list_text_sections(db: Session = Depends(get_db)) -> dict:
    return {"sections": text_service.text_sections.list(db)}


@sections_router.post("")
def save_text_sections(
    payload: TextSectionBatch, db: Session = Depends(get_db)
) -> dict:
    text_service.text_sections.save(db, payload.sections)
    return {"success": True}


@sections_router.patch("/{section_id}")
def update_text_section(
    section_id: str, payload: TextSectionUpdate, db: Session = Depends(get_db)
) -> dict:
    text_service.text_sections.update(db, section_id, payload)
    return {"success": True}


@sections_router.delete("/{section_id}")
def delete_text_section(section_id: str, db: Session = Depends(get_db)) -> dict:
    text_service.text_sections.delete(db, section_id)
    return {"success": True}
