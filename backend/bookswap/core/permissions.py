"""
Authorization policy.

Every service operation asks these predicates instead of comparing ids
inline, so the rules can be tested without going through HTTP.
"""
from typing import Optional
from bookswap.core.config import settings
from bookswap.models.user import User, UserRole
from bookswap.models.book import Book, BookApproval
from bookswap.models.swap import SwapRequest


def is_admin(user: Optional[User]) -> bool:
    """Admin by role flag or by the configured email allow-list."""
    if user is None:
        return False
    if user.role == UserRole.ADMIN:
        return True
    return (user.email or "").lower() in settings.ADMIN_EMAILS


def owns_book(user: Optional[User], book: Book) -> bool:
    return user is not None and book.owner_id is not None and book.owner_id == user.id


def can_manage_book(user: Optional[User], book: Book) -> bool:
    """Owner or admin may update or delete a book."""
    return owns_book(user, book) or is_admin(user)


def can_view_book(user: Optional[User], book: Book) -> bool:
    """Approved books are public; others only to the owner or an admin."""
    return book.approval == BookApproval.APPROVED or can_manage_book(user, book)


def can_resolve_swap(user: Optional[User], swap: SwapRequest) -> bool:
    """Approve and reject belong to the target book's owner (or an admin)."""
    if user is None:
        return False
    return swap.owner_id == user.id or is_admin(user)


def can_cancel_swap(user: Optional[User], swap: SwapRequest) -> bool:
    """Only the requester may cancel."""
    return user is not None and swap.requester_id == user.id


def can_view_swap(user: Optional[User], swap: SwapRequest) -> bool:
    if user is None:
        return False
    return user.id in (swap.requester_id, swap.owner_id) or is_admin(user)
