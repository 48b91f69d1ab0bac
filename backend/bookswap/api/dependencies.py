"""
Shared FastAPI dependencies for authentication.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from bookswap.core.config import settings
from bookswap.core.errors import AuthenticationError
from bookswap.db.session import get_db
from bookswap.models.user import User
from bookswap.services.auth_service import get_user_from_token
from bookswap.services.moderation_service import ensure_admin

bearer_scheme = HTTPBearer(auto_error=False)


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[str]:
    """Token from the Authorization header, falling back to the auth cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def get_current_user(
    token: Optional[str] = Depends(get_token),
    db: Session = Depends(get_db)
) -> User:
    """Authenticated user or 401."""
    return get_user_from_token(token, db)


def get_optional_user(
    token: Optional[str] = Depends(get_token),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Authenticated user, or None for anonymous callers."""
    if not token:
        return None
    try:
        return get_user_from_token(token, db)
    except AuthenticationError:
        return None


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Authenticated admin or 403."""
    ensure_admin(current_user)
    return current_user
