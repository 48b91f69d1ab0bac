"""
Book catalog service: listing, creation, updates and deletion.
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, joinedload
from bookswap.core.config import settings
from bookswap.core.errors import ForbiddenError, NotFoundError, UnexpectedError, ValidationError
from bookswap.core.permissions import can_manage_book, can_view_book
from bookswap.core.utils import generate_public_code, normalize_image_path
from bookswap.db.session import transaction
from bookswap.models.book import Book, BookApproval, BookStatus
from bookswap.models.user import User
from bookswap.services import storage_service, swap_service

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "author", "description", "status", "image")
CODE_ATTEMPTS = 5


def _newest_first(query):
    return query.order_by(Book.created_at.desc(), Book.id.desc())


def _clean_required(value: Optional[str]) -> str:
    return (value or "").strip()


def generate_book_code(db: Session) -> str:
    """Generate a public code not used by any existing book."""
    for _ in range(CODE_ATTEMPTS):
        code = generate_public_code(settings.BOOK_CODE_PREFIX)
        if not db.query(Book.id).filter(Book.code == code).first():
            return code
    raise UnexpectedError("Could not generate a unique book code")


def create_book(
    owner: User,
    title: str,
    author: str,
    description: Optional[str] = "",
    image: Optional[str] = None,
    db: Session = None
) -> Book:
    """Create a listing; it starts pending moderation and available."""
    title = _clean_required(title)
    author = _clean_required(author)
    if not title or not author:
        raise ValidationError("Title and author are required")

    book = Book(
        code=generate_book_code(db),
        title=title,
        author=author,
        description=description or "",
        image=normalize_image_path(image),
        owner_id=owner.id,
        status=BookStatus.AVAILABLE,
        approval=BookApproval.PENDING,
    )
    with transaction(db):
        db.add(book)
    db.refresh(book)
    logger.info(f"User {owner.id} created book {book.id} ({book.code})")
    return book


def get_book(book_id: int, db: Session) -> Book:
    book = db.query(Book).options(joinedload(Book.owner)).filter(Book.id == book_id).first()
    if not book:
        raise NotFoundError("Book not found")
    return book


def get_visible_book(book_id: int, viewer: Optional[User], db: Session) -> Book:
    """Fetch a book the viewer may see; unapproved books look absent to others."""
    book = get_book(book_id, db)
    if not can_view_book(viewer, book):
        raise NotFoundError("Book not found")
    return book


def get_book_by_code(code: str, viewer: Optional[User], db: Session) -> Book:
    book = db.query(Book).options(joinedload(Book.owner)).filter(
        Book.code == (code or "").strip().upper()
    ).first()
    if not book or not can_view_book(viewer, book):
        raise NotFoundError("Book not found")
    return book


def list_public_books(db: Session) -> List[Book]:
    """Approved books only, newest first."""
    query = db.query(Book).options(joinedload(Book.owner)).filter(
        Book.approval == BookApproval.APPROVED
    )
    return _newest_first(query).all()


def list_owner_books(owner: User, db: Session) -> List[Book]:
    """All of the owner's books regardless of status or approval."""
    query = db.query(Book).options(joinedload(Book.owner)).filter(Book.owner_id == owner.id)
    return _newest_first(query).all()


def list_books_by_approval(approval: Optional[BookApproval], db: Session) -> List[Book]:
    """Books with the given approval state, or all books when None."""
    query = db.query(Book).options(joinedload(Book.owner))
    if approval is not None:
        query = query.filter(Book.approval == approval)
    return _newest_first(query).all()


def parse_status(value: Any) -> BookStatus:
    try:
        return BookStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid status: {value}")


def update_book(book_id: int, patch: Dict[str, Any], requester: User, db: Session) -> Book:
    """
    Apply only the fields present in patch. Status changes are not
    restricted here; swap outcomes are enforced by the swap ledger.
    """
    book = get_book(book_id, db)
    if not can_manage_book(requester, book):
        raise ForbiddenError("Forbidden")

    changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS and v is not None}
    for field in ("title", "author"):
        if field in changes:
            changes[field] = _clean_required(changes[field])
            if not changes[field]:
                raise ValidationError("Title and author are required")
    if "status" in changes:
        changes["status"] = parse_status(changes["status"])
    if "image" in changes:
        changes["image"] = normalize_image_path(changes["image"])

    previous_image = book.image
    with transaction(db):
        for field, value in changes.items():
            setattr(book, field, value)
    db.refresh(book)

    if "image" in changes and previous_image and previous_image != book.image:
        storage_service.release_image(previous_image)
    logger.info(f"Book {book.id} updated by user {requester.id}: {sorted(changes)}")
    return book


def remove_book(book: Book, db: Session) -> int:
    """
    Delete a book, rejecting every pending swap request that references it.
    Returns the number of rejected requests.
    """
    image = book.image
    book_id = book.id
    with transaction(db):
        rejected = swap_service.reject_pending_for_book(book_id, db)
        db.delete(book)
    storage_service.release_image(image)
    logger.info(f"Deleted book {book_id}; rejected {rejected} pending swap request(s)")
    return rejected


def delete_book(book_id: int, requester: User, db: Session) -> None:
    """Owner or admin deletes a book."""
    book = get_book(book_id, db)
    if not can_manage_book(requester, book):
        raise ForbiddenError("Forbidden")
    remove_book(book, db)
