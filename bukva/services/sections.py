from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from bukva.models import Section
from bukva.services.section_tree import would_create_cycle

UPDATABLE_FIELDS = ("name", "parent_id", "order_index", "is_active")


class SectionError(Exception):
    pass


class SectionNotFoundError(SectionError, LookupError):
    pass


class SectionValidationError(SectionError, ValueError):
    pass


def fetch_sections(db: Session, include_inactive: bool = False) -> List[Section]:
    """All sections in sibling order, inactive ones filtered unless requested"""
    query = db.query(Section)
    if not include_inactive:
        query = query.filter(Section.is_active == True)
    return query.order_by(Section.order_index, Section.id).all()


def fetch_children(db: Session, parent_id: Optional[int], include_inactive: bool = False) -> List[Section]:
    """Direct children of parent_id, or top-level sections when parent_id is None"""
    query = db.query(Section)
    if not include_inactive:
        query = query.filter(Section.is_active == True)
    if parent_id is None:
        query = query.filter(Section.parent_id.is_(None))
    else:
        query = query.filter(Section.parent_id == parent_id)
    return query.order_by(Section.order_index, Section.id).all()


def get_section(db: Session, section_id: int) -> Section:
    section = db.query(Section).filter(Section.id == section_id).first()
    if not section:
        raise SectionNotFoundError("Section not found")
    return section


def _clean_name(name) -> str:
    cleaned = str(name if name is not None else "").strip()
    if not cleaned:
        raise SectionValidationError("Section name is required")
    return cleaned


def _ensure_parent_exists(db: Session, parent_id: Optional[int]) -> None:
    if parent_id is None:
        return
    parent = db.query(Section.id).filter(Section.id == parent_id).first()
    if not parent:
        raise SectionValidationError("Parent section not found")


def create_section(
    db: Session,
    name: str,
    parent_id: Optional[int] = None,
    order_index: int = 0,
    is_active: bool = True
) -> Section:
    name = _clean_name(name)
    _ensure_parent_exists(db, parent_id)

    now = datetime.now(timezone.utc)
    section = Section(
        name=name,
        parent_id=parent_id,
        order_index=order_index if order_index is not None else 0,
        is_active=bool(is_active),
        created_at=now,
        updated_at=now
    )
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


def update_section(db: Session, section_id: int, changes: Dict) -> Section:
    """
    Apply a partial update. Only keys present in changes are touched.

    Rejects an empty change set, a blank name, an unknown parent, and any
    parent that is the section itself or one of its descendants.
    """
    section = get_section(db, section_id)

    changes = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
    if not changes:
        raise SectionValidationError("No fields to update")

    if "name" in changes:
        name = str(changes["name"] if changes["name"] is not None else "").strip()
        if not name:
            raise SectionValidationError("Section name cannot be empty")
        changes["name"] = name

    if "parent_id" in changes:
        parent_id = changes["parent_id"]
        if parent_id == section_id:
            raise SectionValidationError("Section cannot be parent of itself")
        _ensure_parent_exists(db, parent_id)
        rows = db.query(Section.id, Section.parent_id).all()
        if would_create_cycle(rows, section_id, parent_id):
            raise SectionValidationError("Section cannot be moved under its own descendant")

    if "order_index" in changes and changes["order_index"] is None:
        raise SectionValidationError("Invalid order_index")

    if "is_active" in changes:
        changes["is_active"] = bool(changes["is_active"])

    for field, value in changes.items():
        setattr(section, field, value)
    section.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(section)
    return section


def deactivate_section(db: Session, section_id: int) -> Section:
    """Soft delete. Children and linked exercises are left alone."""
    section = get_section(db, section_id)
    section.is_active = False
    section.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(section)
    return section
