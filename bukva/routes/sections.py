from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List, Optional, Union
from bukva.database import get_db
from bukva.models import User
from bukva.auth.dependencies import get_current_user, is_teacher, require_teacher
from bukva.services.section_tree import (
    SectionNode, FlatSection, build_tree, flatten, list_children, ancestor_path
)
from bukva.services.navigation import NavigationState, EXERCISES_VIEW, decide_view
from bukva.services.sections import (
    SectionNotFoundError, SectionValidationError,
    fetch_sections, fetch_children, create_section, update_section, deactivate_section
)
from bukva.services.exercises import list_exercises, serialize_exercise
from bukva.routes.errors import database_error

router = APIRouter(prefix="/api/sections", tags=["sections"])

ParentRef = Optional[Union[int, str]]


class SectionResponse(BaseModel):
    id: int
    name: str
    parent_id: Optional[int]
    order_index: int
    is_active: bool

    class Config:
        from_attributes = True


class SectionCreate(BaseModel):
    name: Optional[str] = None
    parent_id: ParentRef = None
    order_index: Optional[int] = 0
    is_active: Optional[bool] = True


class SectionUpdate(BaseModel):
    name: Optional[str] = None
    parent_id: ParentRef = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


class CrumbResponse(BaseModel):
    id: int
    name: str


class BrowseResponse(BaseModel):
    level: int
    path: List[CrumbResponse]
    view: str
    sections: List[SectionResponse]
    exercises: List[dict]


def parse_nullable_parent_id(value: ParentRef) -> Optional[int]:
    """None, "" and "null" mean top level; anything else must be an integer id"""
    if value is None or value == "" or value == "null":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid parent_id"
        )


def wants_inactive(current_user: User, include_inactive: Optional[str]) -> bool:
    # Learners never see deactivated sections, whatever they ask for
    return is_teacher(current_user) and include_inactive == "1"


@router.get("/tree", response_model=List[SectionNode])
async def get_sections_tree(
    include_inactive: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Whole section forest in sibling order"""
    include = wants_inactive(current_user, include_inactive)
    try:
        rows = fetch_sections(db, include_inactive=include)
    except SQLAlchemyError as e:
        raise database_error(db, e)
    return build_tree(rows, include_inactive=include)


@router.get("/flat", response_model=List[FlatSection])
async def get_sections_flat(
    include_inactive: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Pre-order list with indented names, for section pickers"""
    include = wants_inactive(current_user, include_inactive)
    try:
        rows = fetch_sections(db, include_inactive=include)
    except SQLAlchemyError as e:
        raise database_error(db, e)
    return flatten(build_tree(rows, include_inactive=include))


@router.get("/browse", response_model=BrowseResponse)
async def browse_sections(
    section_id: Optional[int] = Query(None),
    include_inactive: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """One drill-down step: breadcrumbs, the visible children, or the exercises of a leaf"""
    include = wants_inactive(current_user, include_inactive)
    try:
        rows = fetch_sections(db, include_inactive=include)

        state = NavigationState()
        if section_id is not None:
            path = ancestor_path(rows, section_id)
            if not path:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Section not found"
                )
            for section in path:
                state = state.enter(section)

        children = list_children(rows, state.current_id, include_inactive=include)
        view = decide_view(state, children)
        exercises = []
        if view == EXERCISES_VIEW:
            exercises = [serialize_exercise(e) for e in list_exercises(db, state.current_id)]
    except SQLAlchemyError as e:
        raise database_error(db, e)

    return BrowseResponse(
        level=state.level,
        path=[CrumbResponse(id=crumb.id, name=crumb.name) for crumb in state.path],
        view=view,
        sections=[SectionResponse.model_validate(s) for s in children],
        exercises=exercises
    )


@router.get("", response_model=List[SectionResponse])
async def get_sections(
    parent_id: Optional[str] = Query(None),
    include_inactive: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Direct children of parent_id (top-level sections when omitted or "null")"""
    include = wants_inactive(current_user, include_inactive)
    parsed_parent_id = parse_nullable_parent_id(parent_id)
    try:
        return fetch_children(db, parsed_parent_id, include_inactive=include)
    except SQLAlchemyError as e:
        raise database_error(db, e)


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_section(
    section_data: SectionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher)
):
    """Create a section (teacher only)"""
    parent_id = parse_nullable_parent_id(section_data.parent_id)
    try:
        section = create_section(
            db,
            name=section_data.name,
            parent_id=parent_id,
            order_index=section_data.order_index,
            is_active=True if section_data.is_active is None else section_data.is_active
        )
    except SectionValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        raise database_error(db, e)

    print(f"✅ Section created: {section.name} (ID: {section.id}, parent: {section.parent_id})")
    return {"id": section.id}


@router.patch("/{section_id}")
async def edit_section(
    section_id: int,
    section_data: SectionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher)
):
    """Partial update; only the fields sent are changed (teacher only)"""
    changes = section_data.model_dump(exclude_unset=True)
    if "parent_id" in changes:
        changes["parent_id"] = parse_nullable_parent_id(changes["parent_id"])

    try:
        update_section(db, section_id, changes)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SectionValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        raise database_error(db, e)

    return {"ok": True}


@router.delete("/{section_id}")
async def remove_section(
    section_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher)
):
    """Soft delete: the section is deactivated, never removed (teacher only)"""
    try:
        deactivate_section(db, section_id)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError as e:
        raise database_error(db, e)

    print(f"ℹ️ Section {section_id} deactivated")
    return {"ok": True}
