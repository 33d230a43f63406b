from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from fintools.common.exceptions import UnauthorizedError
from fintools.core.database import SessionLocal
from fintools.core.security import decode_access_token
from fintools.models.user import User


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# auto_error is off so a missing header yields 401 rather than the scheme's default
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Get the currently authenticated user from the JWT token.
    Raises 401 if token is missing, invalid or the user does not exist.
    """
    if credentials is None:
        raise UnauthorizedError("No token, authorization denied")

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise UnauthorizedError("Token is not valid")

    user_email = payload.get("sub")
    if not user_email:
        raise UnauthorizedError("Token payload missing subject")

    user = db.query(User).filter(User.email == user_email).first()
    if not user:
        raise UnauthorizedError("User not found")

    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency to get the current active user.
    """
    return current_user
