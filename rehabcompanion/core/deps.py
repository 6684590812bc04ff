"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rehabcompanion.core.errors import RehabError
from rehabcompanion.core.security import decode_access_token
from rehabcompanion.db.session import get_db
from rehabcompanion.models.user import User
from rehabcompanion.services.messaging import SqlAlchemyMessaging
from rehabcompanion.services.storage import SqlAlchemyStorage

security = HTTPBearer(auto_error=False)


def get_storage(db: Annotated[Session, Depends(get_db)]) -> SqlAlchemyStorage:
    return SqlAlchemyStorage(db)


def get_messaging(db: Annotated[Session, Depends(get_db)]) -> SqlAlchemyMessaging:
    return SqlAlchemyMessaging(db)


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Require authenticated user. Raises 401 if not authenticated."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    # sub is the user id
    try:
        user = db.get(User, int(payload["sub"]))
    except ValueError:
        user = None
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token or user inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_patient(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require current user to be a patient (owns a garden, tasks and mood checks)."""
    if current_user.role != "PATIENT":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only patients can do this",
        )
    return current_user


def require_doctor(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require current user to be a doctor or admin."""
    if current_user.role not in ("DOCTOR", "ADMIN"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return current_user


def http_error(exc: RehabError) -> HTTPException:
    """Translate a domain error into the HTTP response the handlers raise."""
    return HTTPException(status_code=exc.status_code, detail=str(exc))
