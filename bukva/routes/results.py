from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from bukva.database import get_db
from bukva.models import User, Exercise
from bukva.auth.dependencies import require_student, require_teacher
from bukva.services.exercises import record_result, list_results
from bukva.routes.errors import database_error

router = APIRouter(prefix="/api/results", tags=["results"])


class ResultSubmit(BaseModel):
    exercise_id: int
    answer_index: int
    is_correct: bool


class ResultResponse(BaseModel):
    id: int
    student_email: str
    is_correct: bool
    answer_index: int
    created_at: Optional[datetime]
    sentence: str


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_result(
    result_data: ResultSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student)
):
    """Record a learner's answer (student only)"""
    exercise = db.query(Exercise.id).filter(Exercise.id == result_data.exercise_id).first()
    if not exercise:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exercise not found"
        )

    try:
        result = record_result(
            db,
            user_id=current_user.id,
            exercise_id=result_data.exercise_id,
            answer_index=result_data.answer_index,
            is_correct=result_data.is_correct
        )
    except SQLAlchemyError as e:
        raise database_error(db, e)

    return {"id": result.id}


@router.get("", response_model=List[ResultResponse])
async def get_results(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher)
):
    """All learner results, newest first (teacher only)"""
    try:
        return list_results(db)
    except SQLAlchemyError as e:
        raise database_error(db, e)
