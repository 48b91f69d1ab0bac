"""
Pydantic schemas for Book entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from bookswap.models.book import BookStatus, BookApproval
from bookswap.schemas.user import UserSummary


class BookSummary(BaseModel):
    """Book reference embedded in swap requests."""
    id: int
    code: str
    title: str
    author: str
    image_url: Optional[str] = None
    status: BookStatus
    approval: BookApproval

    class Config:
        from_attributes = True


class BookResponse(BookSummary):
    """Schema for book response."""
    description: str = ""
    image: Optional[str] = None
    owner_id: Optional[int] = None
    owner: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class BookEnvelope(BaseModel):
    ok: bool = True
    book: BookResponse


class BookListEnvelope(BaseModel):
    ok: bool = True
    books: List[BookResponse] = []
