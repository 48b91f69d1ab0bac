"""
Swap ledger: swap request creation and the request state machine.

A request starts PENDING and moves exactly once to APPROVED, REJECTED or
CANCELLED. Approval flips both books to SWAPPED and rejects every other
pending request touching either book, all in one transaction.
"""
import logging
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from bookswap.core.errors import ForbiddenError, NotFoundError, ValidationError
from bookswap.core.permissions import (
    can_cancel_swap, can_resolve_swap, can_view_swap, owns_book
)
from bookswap.db.session import transaction
from bookswap.models.book import Book, BookApproval, BookStatus
from bookswap.models.swap import SwapRequest, SwapStatus
from bookswap.models.user import User

logger = logging.getLogger(__name__)

ACTIONS = ("approve", "reject", "cancel")
RESOLUTIONS = {"reject": SwapStatus.REJECTED, "cancel": SwapStatus.CANCELLED}


def _with_refs(query):
    return query.options(
        joinedload(SwapRequest.book),
        joinedload(SwapRequest.offered_book),
        joinedload(SwapRequest.requester),
        joinedload(SwapRequest.owner),
    )


def _touching_books(book_ids: List[int]):
    """Filter for requests referencing any of the books, as target or offered."""
    return or_(SwapRequest.book_id.in_(book_ids), SwapRequest.offered_book_id.in_(book_ids))


def get_swap(swap_id: int, db: Session) -> SwapRequest:
    swap = _with_refs(db.query(SwapRequest)).filter(SwapRequest.id == swap_id).first()
    if not swap:
        raise NotFoundError("Swap request not found")
    return swap


def get_visible_swap(swap_id: int, viewer: User, db: Session) -> SwapRequest:
    swap = get_swap(swap_id, db)
    if not can_view_swap(viewer, swap):
        raise ForbiddenError("Forbidden")
    return swap


def request_swap(
    book_id: int,
    offered_book_id: int,
    requester: User,
    message: Optional[str] = "",
    db: Session = None
) -> SwapRequest:
    """Propose swapping one of the requester's books for someone else's book."""
    book = db.query(Book).filter(Book.id == book_id).first()
    offered = db.query(Book).filter(Book.id == offered_book_id).first()
    if not book or not offered:
        raise NotFoundError("Book not found")

    if not book.is_swappable:
        raise ValidationError("Target book not swappable")
    if not offered.is_swappable:
        raise ValidationError("Offered book not available")
    if book.owner_id is None or book.owner is None:
        raise ValidationError("Target book has no owner")
    if book.owner_id == requester.id:
        raise ValidationError("Cannot request your own book")
    if not owns_book(requester, offered):
        raise ForbiddenError("You can only offer your own book")

    already = db.query(SwapRequest.id).filter(
        SwapRequest.requester_id == requester.id,
        SwapRequest.book_id == book.id,
        SwapRequest.status == SwapStatus.PENDING
    ).first()
    if already:
        raise ValidationError("Request already pending")

    swap = SwapRequest(
        book_id=book.id,
        offered_book_id=offered.id,
        requester_id=requester.id,
        owner_id=book.owner_id,
        message=(message or "").strip(),
        status=SwapStatus.PENDING,
    )
    with transaction(db):
        db.add(swap)
    logger.info(
        f"User {requester.id} requested swap {swap.id}: book {offered.id} for book {book.id}"
    )
    return get_swap(swap.id, db)


def _claim(swap: SwapRequest, new_status: SwapStatus, db: Session) -> None:
    """
    Move a request out of PENDING. The conditional update is the
    serialization point: a concurrent resolver sees zero rows.
    """
    claimed = db.query(SwapRequest).filter(
        SwapRequest.id == swap.id,
        SwapRequest.status == SwapStatus.PENDING
    ).update({SwapRequest.status: new_status}, synchronize_session=False)
    if claimed != 1:
        raise ValidationError("Already resolved")


def _approve(swap: SwapRequest, db: Session) -> int:
    """Approve inside the caller's transaction; returns the number of siblings rejected."""
    book_ids = [swap.book_id, swap.offered_book_id]
    if None in book_ids:
        raise ValidationError("Book no longer exists")

    _claim(swap, SwapStatus.APPROVED, db)

    # Moderation may have hidden a book since the request was made
    flipped = db.query(Book).filter(
        Book.id.in_(book_ids),
        Book.status == BookStatus.AVAILABLE,
        Book.approval == BookApproval.APPROVED
    ).update({Book.status: BookStatus.SWAPPED}, synchronize_session=False)
    if flipped != len(book_ids):
        raise ValidationError("Book no longer available")

    return db.query(SwapRequest).filter(
        SwapRequest.id != swap.id,
        SwapRequest.status == SwapStatus.PENDING,
        _touching_books(book_ids)
    ).update({SwapRequest.status: SwapStatus.REJECTED}, synchronize_session=False)


def resolve_swap(swap_id: int, action: str, actor: User, db: Session) -> SwapRequest:
    """Apply approve, reject or cancel to a pending request."""
    swap = get_swap(swap_id, db)
    action = (action or "").strip().lower()
    if action not in ACTIONS:
        raise ValidationError("Invalid action")

    if action == "cancel":
        if not can_cancel_swap(actor, swap):
            raise ForbiddenError("Only the requester can cancel")
    elif not can_resolve_swap(actor, swap):
        raise ForbiddenError("Only the book owner can approve or reject")

    if swap.status != SwapStatus.PENDING:
        raise ValidationError("Already resolved")

    with transaction(db):
        if action == "approve":
            rejected = _approve(swap, db)
        else:
            _claim(swap, RESOLUTIONS[action], db)

    if action == "approve":
        logger.info(f"Swap {swap_id} approved by user {actor.id}; auto-rejected {rejected} competing request(s)")
    else:
        logger.info(f"Swap {swap_id} {RESOLUTIONS[action].value} by user {actor.id}")

    return get_swap(swap_id, db)


def reject_pending_for_book(book_id: int, db: Session) -> int:
    """
    Reject pending requests that reference the book as target or offered.
    Runs inside the caller's transaction; returns the number rejected.
    """
    return db.query(SwapRequest).filter(
        SwapRequest.status == SwapStatus.PENDING,
        _touching_books([book_id])
    ).update({SwapRequest.status: SwapStatus.REJECTED}, synchronize_session=False)


def list_requests_by_requester(requester: User, db: Session) -> List[SwapRequest]:
    """Requests the user sent, newest first."""
    return _with_refs(db.query(SwapRequest)).filter(
        SwapRequest.requester_id == requester.id
    ).order_by(SwapRequest.created_at.desc(), SwapRequest.id.desc()).all()


def list_requests_by_owner(owner: User, db: Session) -> List[SwapRequest]:
    """Requests for the user's books, newest first."""
    return _with_refs(db.query(SwapRequest)).filter(
        SwapRequest.owner_id == owner.id
    ).order_by(SwapRequest.created_at.desc(), SwapRequest.id.desc()).all()
