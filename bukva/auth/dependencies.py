from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from bukva.database import get_db
from bukva.models.user import User, UserRole
from bukva.auth.tokens import verify_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token(token)
    if payload is None:
        print("❌ Token verification failed")
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        print("❌ Token payload missing 'sub'")
        raise credentials_exception

    try:
        user_id = int(user_id)
    except (ValueError, TypeError):
        print(f"❌ Token 'sub' is not a user id: {user_id}")
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        print(f"❌ User not found in database for id: {user_id}")
        raise credentials_exception

    return user


def is_teacher(user: User) -> bool:
    return user.role == UserRole.TEACHER


def require_role(allowed_roles: list[UserRole]):
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role.value not in [role.value for role in allowed_roles]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user
    return role_checker


require_teacher = require_role([UserRole.TEACHER])
require_student = require_role([UserRole.STUDENT])
