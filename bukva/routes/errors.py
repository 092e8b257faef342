from fastapi import HTTPException, status
from sqlalchemy.orm import Session


def database_error(db: Session, error: Exception) -> HTTPException:
    """Roll back the request's session and turn a storage failure into a plain 500"""
    db.rollback()
    print(f"❌ Database error: {type(error).__name__}: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database error"
    )
