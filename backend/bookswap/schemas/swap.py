"""
Pydantic schemas for SwapRequest entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from bookswap.models.swap import SwapStatus
from bookswap.schemas.book import BookSummary
from bookswap.schemas.user import UserSummary


class SwapCreate(BaseModel):
    """Schema for a new swap request."""
    book_id: int  # Target book (owned by someone else)
    offered_book_id: int  # Requester's own book
    message: Optional[str] = ""


class SwapAction(BaseModel):
    """Schema for resolving a swap request."""
    action: str  # approve | reject | cancel


class SwapResponse(BaseModel):
    """Schema for swap request response with referenced books and parties."""
    id: int
    book_id: Optional[int] = None
    offered_book_id: Optional[int] = None
    requester_id: int
    owner_id: int
    message: str = ""
    status: SwapStatus
    book: Optional[BookSummary] = None
    offered_book: Optional[BookSummary] = None
    requester: Optional[UserSummary] = None
    owner: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SwapEnvelope(BaseModel):
    ok: bool = True
    swap: SwapResponse


class SwapListEnvelope(BaseModel):
    ok: bool = True
    swaps: List[SwapResponse] = []
