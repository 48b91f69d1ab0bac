"""
Auth service: registration, login with lockout, and token issuance.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from bookswap.core.config import settings
from bookswap.core.errors import (
    AuthenticationError, ConflictError, LockedError, ValidationError
)
from bookswap.core.security import (
    create_access_token, decode_access_token, get_password_hash, is_strong_password,
    verify_password
)
from bookswap.db.session import transaction
from bookswap.models.user import User, UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def issue_token(user: User) -> str:
    """Signed session token carrying identity id, email and role."""
    role = user.role.value if isinstance(user.role, UserRole) else str(user.role)
    return create_access_token(data={"sub": str(user.id), "email": user.email, "role": role})


def register_user(name: Optional[str], email: str, password: str, db: Session) -> User:
    """Create a user account with role 'user'."""
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password required")
    if not is_strong_password(password):
        raise ValidationError(
            "Password must be at least 8 characters and include upper and lower case "
            "letters, a digit and a symbol"
        )
    if get_user_by_email(email, db):
        raise ConflictError("Email already registered")

    user = User(
        name=(name or "").strip() or email.split("@")[0],
        email=email,
        hashed_password=get_password_hash(password),
        role=UserRole.USER,
    )
    with transaction(db):
        db.add(user)
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.email})")
    return user


def record_failed_login(user: User, now: datetime) -> None:
    """
    Count a failed attempt. Reaching the limit locks the account for
    LOGIN_LOCK_MINUTES and resets the counter.
    """
    if user.lock_until is not None and not user.is_locked(now):
        user.lock_until = None
    user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
    if user.failed_login_attempts >= settings.LOGIN_ATTEMPT_LIMIT:
        user.lock_until = now + timedelta(minutes=settings.LOGIN_LOCK_MINUTES)
        user.failed_login_attempts = 0


def reset_login_attempts(user: User) -> None:
    user.failed_login_attempts = 0
    user.lock_until = None


def authenticate_user(
    email: str,
    password: str,
    db: Session,
    now: Optional[datetime] = None
) -> Tuple[User, str]:
    """
    Verify credentials and return (user, token).

    Raises LockedError while the account is locked (without counting the
    attempt) and AuthenticationError with the remaining attempts otherwise.
    """
    now = now or datetime.utcnow()
    if not email or not password:
        raise ValidationError("Email and password required")

    user = get_user_by_email(email, db)
    if not user or not user.hashed_password:
        raise AuthenticationError(INVALID_CREDENTIALS)

    if user.is_locked(now):
        raise LockedError(user.lock_until, now=now)

    if not verify_password(password, user.hashed_password):
        with transaction(db):
            record_failed_login(user, now)
        if user.is_locked(now):
            logger.info(f"Account {user.email} locked until {user.lock_until.isoformat()}")
            raise LockedError(user.lock_until, now=now)
        attempts_left = max(0, settings.LOGIN_ATTEMPT_LIMIT - user.failed_login_attempts)
        logger.warning(f"Failed login for {user.email}, {attempts_left} attempt(s) left")
        raise AuthenticationError(INVALID_CREDENTIALS, details={"attempts_left": attempts_left})

    with transaction(db):
        reset_login_attempts(user)
    return user, issue_token(user)


def get_user_from_token(token: Optional[str], db: Session) -> User:
    """Resolve the user a session token belongs to."""
    if not token:
        raise AuthenticationError("Not authenticated")
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        raise AuthenticationError("Invalid token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationError("User not found")
    return user
