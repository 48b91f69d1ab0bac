"""
Swap request model for one-for-one book swaps.
"""
from sqlalchemy import Column, Text, Integer, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship
from bookswap.db.base import BaseModel
import enum


class SwapStatus(str, enum.Enum):
    """Swap request status; everything but PENDING is terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class SwapRequest(BaseModel):
    """A requester offers one of their books for an owner's book."""
    __tablename__ = "swap_requests"
    __table_args__ = (
        Index("ix_swap_requests_requester_created", "requester_id", "created_at"),
        Index("ix_swap_requests_owner_created", "owner_id", "created_at"),
    )

    # Book references are cleared when a book is deleted; history is kept
    book_id = Column(Integer, ForeignKey("books.id", ondelete="SET NULL"), nullable=True, index=True)
    offered_book_id = Column(Integer, ForeignKey("books.id", ondelete="SET NULL"), nullable=True, index=True)

    # Both parties denormalized for lookups without joining books
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    message = Column(Text, nullable=False, default="")
    status = Column(SQLEnum(SwapStatus), default=SwapStatus.PENDING, nullable=False, index=True)

    # Relationships
    book = relationship("Book", foreign_keys=[book_id], back_populates="requested_in")
    offered_book = relationship("Book", foreign_keys=[offered_book_id], back_populates="offered_in")
    requester = relationship("User", foreign_keys=[requester_id])
    owner = relationship("User", foreign_keys=[owner_id])
