"""
Admin moderation routes.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from bookswap.db.session import get_db
from bookswap.models.user import User
from bookswap.schemas.book import BookEnvelope, BookListEnvelope
from bookswap.schemas.common import MessageEnvelope
from bookswap.services import moderation_service
from bookswap.api.dependencies import get_current_admin
from bookswap.api.routes.books import book_envelope, book_list_envelope

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/books", response_model=BookListEnvelope)
async def list_books(
    approval: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """All books, or those matching ?approval= (?status= accepted as an alias)."""
    books = moderation_service.list_books(admin, approval or status, db)
    return book_list_envelope(books)


@router.patch("/books/{book_id}/approve", response_model=BookEnvelope)
async def approve_book(
    book_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Make a book publicly visible."""
    return book_envelope(moderation_service.approve_book(book_id, admin, db))


@router.patch("/books/{book_id}/reject", response_model=BookEnvelope)
async def reject_book(
    book_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Hide a book from the public listing."""
    return book_envelope(moderation_service.reject_book(book_id, admin, db))


@router.delete("/books/{book_id}", response_model=MessageEnvelope)
async def delete_book(
    book_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a book; pending swap requests involving it are rejected."""
    moderation_service.delete_book(book_id, admin, db)
    return MessageEnvelope(message="Book deleted")
