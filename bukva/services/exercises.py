import json
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from bukva.models import Exercise, ExerciseType, Result, Section, User

MULTIPLE_CHOICE_OPTIONS = 4


class ExerciseValidationError(ValueError):
    pass


def parse_options(options_json: Optional[str]) -> List[str]:
    """Stored options as a list; anything unreadable counts as no options"""
    if not options_json:
        return []
    try:
        parsed = json.loads(options_json)
    except (json.JSONDecodeError, TypeError):
        return []
    return parsed if isinstance(parsed, list) else []


def serialize_exercise(exercise: Exercise) -> Dict:
    return {
        "id": exercise.id,
        "sentence": exercise.sentence,
        "options": parse_options(exercise.options_json),
        "correct_index": exercise.correct_index,
        "section_id": exercise.section_id,
        "exercise_type": exercise.exercise_type.value,
    }


def list_exercises(db: Session, section_id: Optional[int] = None) -> List[Exercise]:
    query = db.query(Exercise)
    if section_id is not None:
        query = query.filter(Exercise.section_id == section_id)
    return query.order_by(Exercise.id).all()


def create_exercise(
    db: Session,
    sentence: str,
    section_id: Optional[int],
    exercise_type: str,
    options: Optional[List] = None,
    correct_index: Optional[int] = None
) -> Exercise:
    """
    Validate and store an exercise.

    multiple_choice needs exactly 4 non-blank options and a correct_index in
    0..3. Every other type is stored without options and correct_index -1.
    The target section only has to exist; inactive sections are fine.
    """
    sentence = str(sentence or "").strip()
    exercise_type = str(exercise_type or "").strip()
    if not sentence or section_id is None or not exercise_type:
        raise ExerciseValidationError("section_id, exercise_type and sentence are required")

    try:
        kind = ExerciseType(exercise_type)
    except ValueError:
        raise ExerciseValidationError("Unsupported exercise_type") from None

    section = db.query(Section.id).filter(Section.id == section_id).first()
    if not section:
        raise ExerciseValidationError("Section not found")

    if kind == ExerciseType.MULTIPLE_CHOICE:
        options = [str(item).strip() for item in (options or [])]
        if len(options) != MULTIPLE_CHOICE_OPTIONS or any(not item for item in options):
            raise ExerciseValidationError("Multiple choice requires 4 options")
        if correct_index is None or not 0 <= correct_index < MULTIPLE_CHOICE_OPTIONS:
            raise ExerciseValidationError("Invalid correct_index for multiple_choice")
    else:
        options = []
        correct_index = -1

    exercise = Exercise(
        sentence=sentence,
        options_json=json.dumps(options, ensure_ascii=False),
        correct_index=correct_index,
        section_id=section_id,
        exercise_type=kind
    )
    db.add(exercise)
    db.commit()
    db.refresh(exercise)
    return exercise


def record_result(db: Session, user_id: int, exercise_id: int, answer_index: int, is_correct: bool) -> Result:
    result = Result(
        user_id=user_id,
        exercise_id=exercise_id,
        answer_index=answer_index,
        is_correct=bool(is_correct)
    )
    db.add(result)
    db.commit()
    db.refresh(result)
    return result


def list_results(db: Session) -> List[Dict]:
    """Every recorded answer, newest first, with the student's email and the sentence"""
    rows = (
        db.query(Result, User.email, Exercise.sentence)
        .join(User, User.id == Result.user_id)
        .join(Exercise, Exercise.id == Result.exercise_id)
        .order_by(Result.created_at.desc(), Result.id.desc())
        .all()
    )
    return [
        {
            "id": result.id,
            "student_email": email,
            "is_correct": result.is_correct,
            "answer_index": result.answer_index,
            "created_at": result.created_at,
            "sentence": sentence,
        }
        for result, email, sentence in rows
    ]
