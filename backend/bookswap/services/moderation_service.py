"""
Moderation service for admin-only operations on book approval.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from bookswap.core.errors import ForbiddenError, ValidationError
from bookswap.core.permissions import is_admin
from bookswap.db.session import transaction
from bookswap.models.book import Book, BookApproval
from bookswap.models.user import User
from bookswap.services import book_service

logger = logging.getLogger(__name__)


def ensure_admin(user: User) -> None:
    if not is_admin(user):
        raise ForbiddenError("Admin only")


def parse_approval(value: Optional[str]) -> Optional[BookApproval]:
    """Map a query value to an approval filter; empty or 'all' means no filter."""
    if value is None or not value.strip() or value.strip().lower() == "all":
        return None
    try:
        return BookApproval(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid approval filter: {value}")


def list_books(admin: User, approval: Optional[str], db: Session) -> List[Book]:
    ensure_admin(admin)
    return book_service.list_books_by_approval(parse_approval(approval), db)


def set_approval(book_id: int, approval: BookApproval, admin: User, db: Session) -> Book:
    """Set a book's approval state; repeating the same state is a no-op."""
    ensure_admin(admin)
    book = book_service.get_book(book_id, db)
    if book.approval == approval:
        return book
    with transaction(db):
        book.approval = approval
    db.refresh(book)
    logger.info(f"Admin {admin.id} set book {book.id} approval to {approval.value}")
    return book


def approve_book(book_id: int, admin: User, db: Session) -> Book:
    return set_approval(book_id, BookApproval.APPROVED, admin, db)


def reject_book(book_id: int, admin: User, db: Session) -> Book:
    return set_approval(book_id, BookApproval.REJECTED, admin, db)


def delete_book(book_id: int, admin: User, db: Session) -> None:
    """Admin delete; same cascade as an owner deleting their book."""
    ensure_admin(admin)
    book = book_service.get_book(book_id, db)
    book_service.remove_book(book, db)
