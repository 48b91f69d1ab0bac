"""
Tests for the authorization policy functions.
"""
from bookswap.core import permissions
from bookswap.core.config import settings
from bookswap.models.book import Book, BookApproval
from bookswap.models.swap import SwapRequest
from bookswap.models.user import User, UserRole


def user(id, email=None, role=UserRole.USER):
    return User(id=id, name=f"u{id}", email=email or f"u{id}@example.com", role=role)


def test_is_admin_by_role_or_allow_list(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["boss@example.com"])
    assert permissions.is_admin(user(1, role=UserRole.ADMIN))
    assert permissions.is_admin(user(2, email="boss@example.com"))
    assert not permissions.is_admin(user(3))
    assert not permissions.is_admin(None)


def test_can_manage_book():
    owner, other, admin = user(1), user(2), user(3, role=UserRole.ADMIN)
    book = Book(id=10, owner_id=owner.id)
    assert permissions.can_manage_book(owner, book)
    assert permissions.can_manage_book(admin, book)
    assert not permissions.can_manage_book(other, book)
    assert not permissions.can_manage_book(None, book)


def test_ownerless_book_is_managed_by_admin_only():
    book = Book(id=10, owner_id=None)
    assert not permissions.can_manage_book(user(1), book)
    assert permissions.can_manage_book(user(2, role=UserRole.ADMIN), book)


def test_can_view_book():
    owner, other = user(1), user(2)
    pending = Book(id=10, owner_id=owner.id, approval=BookApproval.PENDING)
    approved = Book(id=11, owner_id=owner.id, approval=BookApproval.APPROVED)
    assert permissions.can_view_book(None, approved)
    assert permissions.can_view_book(owner, pending)
    assert not permissions.can_view_book(other, pending)
    assert not permissions.can_view_book(None, pending)


def test_swap_resolution_roles():
    requester, owner, stranger = user(1), user(2), user(3)
    admin = user(4, role=UserRole.ADMIN)
    swap = SwapRequest(id=5, requester_id=requester.id, owner_id=owner.id)

    assert permissions.can_resolve_swap(owner, swap)
    assert permissions.can_resolve_swap(admin, swap)
    assert not permissions.can_resolve_swap(requester, swap)
    assert not permissions.can_resolve_swap(stranger, swap)

    assert permissions.can_cancel_swap(requester, swap)
    assert not permissions.can_cancel_swap(owner, swap)
    assert not permissions.can_cancel_swap(admin, swap)

    assert permissions.can_view_swap(requester, swap)
    assert permissions.can_view_swap(owner, swap)
    assert permissions.can_view_swap(admin, swap)
    assert not permissions.can_view_swap(stranger, swap)
