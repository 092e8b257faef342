from bukva.models.user import User, UserRole
from bukva.models.section import Section
from bukva.models.exercise import Exercise, ExerciseType
from bukva.models.result import Result

__all__ = [
    "User",
    "UserRole",
    "Section",
    "Exercise",
    "ExerciseType",
    "Result",
]
