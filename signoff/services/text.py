from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from signoff.models.review import TextGroup, TextItem, TextSection
from signoff.schemas.review import (
    TextGroupIn,
    TextGroupUpdate,
    TextItemIn,
    TextItemUpdate,
    TextSectionIn,
    TextSectionUpdate,
)
from signoff.services.assets import prune_activity
from signoff.services.common import (
    apply_update,
    get_or_404,
    require_batch,
    upsert_all,
    utcnow,
)

logger = logging.getLogger(__name__)


class TextItems:
    @staticmethod
    def list(db: Session) -> list[TextItem]:
        return db.scalars(select(TextItem).order_by(TextItem.created_at.desc())).all()

    @staticmethod
    def save(db: Session, items: list[TextItemIn]) -> int:
        require_batch(items, "items")
        count = upsert_all(db, TextItem, [item.model_dump() for item in items])
        logger.info("Saved %d text items", count)
        return count

    @staticmethod
    def update(db: Session, item_id: str, payload: TextItemUpdate) -> TextItem:
        item = get_or_404(db, TextItem, item_id, "Text item")
        apply_update(item, payload.model_dump(exclude_unset=True))
        db.flush()
        logger.info("Updated text item %s", item.id)
        return item

    @staticmethod
    def delete(db: Session, item_id: str) -> None:
        item = get_or_404(db, TextItem, item_id, "Text item")
        db.delete(item)
        prune_activity(db, "text", item_id)
        db.flush()
        logger.info("Deleted text item %s", item_id)


class TextGroups:
    @staticmethod
    def list(db: Session) -> list[TextGroup]:
        return db.scalars(
            select(TextGroup).order_by(TextGroup.created_at.desc())
        ).all()

    @staticmethod
    def save(db: Session, groups: list[TextGroupIn]) -> int:
        require_batch(groups, "groups")
        count = upsert_all(db, TextGroup, [group.model_dump() for group in groups])
        logger.info("Saved %d text groups", count)
        return count

    @staticmethod
    def update(db: Session, group_id: str, payload: TextGroupUpdate) -> TextGroup:
        group = get_or_404(db, TextGroup, group_id, "Text group")
        apply_update(group, payload.model_dump(exclude_unset=True))
        db.flush()
        logger.info("Updated text group %s", group.id)
        return group

    @staticmethod
    def delete(db: Session, group_id: str) -> None:
        group = get_or_404(db, TextGroup, group_id, "Text group")
        db.execute(
            update(TextItem)
            .where(TextItem.group_id == group_id)
            .values(group_id=None, section_id=None, updated_at=utcnow())
        )
        db.execute(delete(TextSection).where(TextSection.group_id == group_id))
        db.delete(group)
        db.flush()
        logger.info("Deleted text group %s", group_id)


class TextSections:
    @staticmethod
    def list(db: Session) -> list[TextSection]:
        return db.scalars(
            select(TextSection).order_by(TextSection.created_at.desc())
        ).all()

    @staticmethod
    def save(db: Session, sections: list[TextSectionIn]) -> int:
        require_batch(sections, "sections")
        count = upsert_all(
            db, TextSection, [section.model_dump() for section in sections]
        )
        logger.info("Saved %d text sections", count)
        return count

    @staticmethod
    def update(
        db: Session, section_id: str, payload: TextSectionUpdate
    ) -> TextSection:
        section = get_or_404(db, TextSection, section_id, "Text section")
        apply_update(section, payload.model_dump(exclude_unset=True))
        db.flush()
        logger.info("Updated text section %s", section.id)
        return section

    @staticmethod
    def delete(db: Session, section_id: str) -> None:
        section = get_or_404(db, TextSection, section_id, "Text section")
        db.execute(
            update(TextItem)
            .where(TextItem.section_id == section_id)
            .values(section_id=None, updated_at=utcnow())
        )
        db.delete(section)
        db.flush()
        logger.info("Deleted text section %s", section_id)


text_items = TextItems()
text_groups = TextGroups()
text_sections = TextSections()
