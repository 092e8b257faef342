from sqlalchemy import Column, Integer, Text, Enum, ForeignKey
from sqlalchemy.orm import relationship
import enum
from bukva.database import Base


class ExerciseType(str, enum.Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TEXT_INPUT = "text_input"
    SENTENCE_BUILDER = "sentence_builder"


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    sentence = Column(Text, nullable=False)
    options_json = Column(Text, nullable=False, default="[]")  # JSON list of option strings
    correct_index = Column(Integer, nullable=False, default=-1)  # -1 for types without options
    section_id = Column(Integer, ForeignKey("sections.id"), nullable=False, index=True)
    exercise_type = Column(
        Enum(ExerciseType, values_callable=lambda e: [member.value for member in e]),
        nullable=False,
        default=ExerciseType.MULTIPLE_CHOICE
    )

    section = relationship("Section", back_populates="exercises")
    results = relationship("Result", back_populates="exercise")
