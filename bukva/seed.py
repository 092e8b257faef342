"""
Idempotent seed data: demo users, the default section tree and the
exercises shipped in exercises.json.
"""
import json
import os
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from bukva.auth.passwords import get_password_hash
from bukva.models import User, UserRole, Section, Exercise, ExerciseType

DEFAULT_USERS = [
    {"email": "admin@example.com", "password": "admin123", "nickname": "admin", "role": UserRole.TEACHER},
    {"email": "student@example.com", "password": "student123", "nickname": "student", "role": UserRole.STUDENT},
]


def ensure_section(db: Session, name: str, parent_id: Optional[int], order_index: int) -> int:
    """Create the section under parent_id, or re-activate and re-order the existing one"""
    now = datetime.now(timezone.utc)
    query = db.query(Section).filter(Section.name == name)
    if parent_id is None:
        query = query.filter(Section.parent_id.is_(None))
    else:
        query = query.filter(Section.parent_id == parent_id)
    existing = query.order_by(Section.id).first()

    if existing:
        existing.order_index = order_index
        existing.is_active = True
        existing.updated_at = now
        db.commit()
        return existing.id

    section = Section(
        name=name,
        parent_id=parent_id,
        order_index=order_index,
        is_active=True,
        created_at=now,
        updated_at=now
    )
    db.add(section)
    db.commit()
    db.refresh(section)
    return section.id


def seed_sections(db: Session) -> int:
    """Seed the default topic tree; returns the id of the section new exercises land in"""
    grammar_id = ensure_section(db, "Grammar", None, 0)
    ensure_section(db, "Vocabulary", None, 1)
    ensure_section(db, "Listening", None, 2)

    present_tenses_id = ensure_section(db, "Present Tenses", grammar_id, 0)
    ensure_section(db, "Past Tenses", grammar_id, 1)
    ensure_section(db, "Future Tenses", grammar_id, 2)
    ensure_section(db, "All Tenses", grammar_id, 3)
    ensure_section(db, "Modals", grammar_id, 4)

    present_simple_id = ensure_section(db, "Present Simple", present_tenses_id, 0)
    ensure_section(db, "Present Simple and Progressive", present_tenses_id, 1)
    ensure_section(db, "Present Perfect", present_tenses_id, 2)

    return present_simple_id


def seed_users(db: Session) -> None:
    if db.query(User).count() > 0:
        print("ℹ️ Users already exist")
        return

    for user in DEFAULT_USERS:
        db.add(User(
            email=user["email"],
            password_hash=get_password_hash(user["password"]),
            nickname=user["nickname"],
            role=user["role"]
        ))
    db.commit()
    print(f"✅ Created {len(DEFAULT_USERS)} demo users")


def seed_exercises(db: Session, default_section_id: int, exercises_path: str) -> int:
    """Load exercises.json into an empty exercises table; returns how many were added"""
    if db.query(Exercise).count() > 0 or not os.path.exists(exercises_path):
        return 0

    with open(exercises_path, encoding="utf-8") as f:
        items = json.load(f)

    for item in items:
        correct_index = item.get("correctIndex", item.get("correct_index"))
        db.add(Exercise(
            sentence=item["sentence"],
            options_json=json.dumps(item.get("options", []), ensure_ascii=False),
            correct_index=correct_index,
            section_id=default_section_id,
            exercise_type=ExerciseType.MULTIPLE_CHOICE
        ))
    db.commit()
    print(f"✅ Created {len(items)} exercises from {exercises_path}")
    return len(items)


def seed_database(db: Session, exercises_path: str) -> None:
    seed_users(db)
    default_section_id = seed_sections(db)
    print(f"✅ Section tree verified (default section ID: {default_section_id})")
    seed_exercises(db, default_section_id, exercises_path)
