"""
Authentication routes for register, login, me and logout.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from bookswap.core.config import settings
from bookswap.db.session import get_db
from bookswap.schemas.common import MessageEnvelope
from bookswap.schemas.user import AuthResponse, UserCreate, UserEnvelope, UserLogin, UserResponse
from bookswap.models.user import User
from bookswap.services import auth_service
from bookswap.api.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 3600,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, response: Response, db: Session = Depends(get_db)):
    """Register a new user and sign them in."""
    user = auth_service.register_user(user_data.name, user_data.email, user_data.password, db)
    token = auth_service.issue_token(user)
    set_auth_cookie(response, token)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user, token = auth_service.authenticate_user(credentials.email, credentials.password, db)
    set_auth_cookie(response, token)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.post("/logout", response_model=MessageEnvelope)
async def logout(response: Response):
    """Logout; tokens are stateless, so this only clears the auth cookie."""
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return MessageEnvelope(message="Logged out successfully")
