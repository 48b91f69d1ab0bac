"""Models package - Import all models for SQLAlchemy registration."""
from bookswap.models.user import User, UserRole
from bookswap.models.book import Book, BookStatus, BookApproval
from bookswap.models.swap import SwapRequest, SwapStatus

__all__ = [
    "User",
    "UserRole",
    "Book",
    "BookStatus",
    "BookApproval",
    "SwapRequest",
    "SwapStatus",
]
