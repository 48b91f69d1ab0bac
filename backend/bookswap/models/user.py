"""
User model for authentication and login protection.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, String, Integer, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from bookswap.db.base import BaseModel
import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """User model; email is unique and stored lowercased."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.USER, nullable=False)

    # Login protection
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    lock_until = Column(DateTime, nullable=True)

    # Relationships
    books = relationship("Book", back_populates="owner")

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        """Locked iff lock_until is set and still in the future."""
        if self.lock_until is None:
            return False
        return self.lock_until > (now or datetime.utcnow())
