"""
Book model for listings offered for swapping.
"""
from sqlalchemy import Column, String, Text, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from bookswap.core.config import settings
from bookswap.core.utils import build_image_url
from bookswap.db.base import BaseModel
import enum


class BookStatus(str, enum.Enum):
    """Availability, driven by swap outcomes."""
    AVAILABLE = "available"
    SWAPPED = "swapped"


class BookApproval(str, enum.Enum):
    """Moderation state, set by admins."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Book(BaseModel):
    """Book listing; code is the public identifier and never changes."""
    __tablename__ = "books"

    code = Column(String(20), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    image = Column(String(500), nullable=True)  # "/uploads/<file>" or absolute URL

    # Nullable only for legacy rows imported without an owner
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    status = Column(SQLEnum(BookStatus), default=BookStatus.AVAILABLE, nullable=False, index=True)
    approval = Column(SQLEnum(BookApproval), default=BookApproval.PENDING, nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="books")
    requested_in = relationship("SwapRequest", foreign_keys="SwapRequest.book_id", back_populates="book")
    offered_in = relationship("SwapRequest", foreign_keys="SwapRequest.offered_book_id", back_populates="offered_book")

    @property
    def image_url(self):
        return build_image_url(self.image, settings.PUBLIC_BASE_URL)

    @property
    def is_swappable(self) -> bool:
        return self.approval == BookApproval.APPROVED and self.status == BookStatus.AVAILABLE
