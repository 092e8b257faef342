from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List, Optional
from bukva.database import get_db
from bukva.models import User
from bukva.auth.dependencies import get_current_user, require_teacher
from bukva.services.exercises import (
    ExerciseValidationError, create_exercise, list_exercises, serialize_exercise
)
from bukva.routes.errors import database_error

router = APIRouter(prefix="/api/exercises", tags=["exercises"])


class ExerciseResponse(BaseModel):
    id: int
    sentence: str
    options: List[str]
    correct_index: int
    section_id: int
    exercise_type: str


class ExerciseCreate(BaseModel):
    sentence: Optional[str] = None
    section_id: Optional[int] = None
    exercise_type: Optional[str] = None
    options: Optional[List[str]] = None
    correct_index: Optional[int] = None


@router.get("", response_model=List[ExerciseResponse])
async def get_exercises(
    section_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Exercises of one section, or all of them when section_id is omitted"""
    try:
        exercises = list_exercises(db, section_id)
    except SQLAlchemyError as e:
        raise database_error(db, e)
    return [serialize_exercise(e) for e in exercises]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_exercise(
    exercise_data: ExerciseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher)
):
    """Author a new exercise (teacher only)"""
    try:
        exercise = create_exercise(
            db,
            sentence=exercise_data.sentence,
            section_id=exercise_data.section_id,
            exercise_type=exercise_data.exercise_type,
            options=exercise_data.options,
            correct_index=exercise_data.correct_index
        )
    except ExerciseValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        raise database_error(db, e)

    print(f"✅ Exercise created: ID {exercise.id} in section {exercise.section_id}")
    return {"id": exercise.id}
