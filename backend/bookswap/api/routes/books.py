"""
Book catalog routes.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional
from bookswap.db.session import get_db
from bookswap.core.errors import ServiceError
from bookswap.models.book import Book
from bookswap.models.user import User
from bookswap.schemas.book import BookEnvelope, BookListEnvelope, BookResponse
from bookswap.schemas.common import MessageEnvelope
from bookswap.services import book_service, storage_service
from bookswap.api.dependencies import get_current_user, get_optional_user

router = APIRouter(prefix="/books", tags=["books"])


def book_envelope(book: Book) -> BookEnvelope:
    return BookEnvelope(book=BookResponse.model_validate(book))


def book_list_envelope(books) -> BookListEnvelope:
    return BookListEnvelope(books=[BookResponse.model_validate(b) for b in books])


async def resolve_image(image: Optional[UploadFile], image_url: Optional[str]) -> Optional[str]:
    """Uploaded file wins over a supplied image reference."""
    if image is not None and image.filename:
        return await storage_service.save_upload(image)
    return image_url


@router.get("", response_model=BookListEnvelope)
async def list_books(db: Session = Depends(get_db)):
    """Public listing: approved books only, newest first."""
    return book_list_envelope(book_service.list_public_books(db))


@router.get("/mine", response_model=BookListEnvelope)
async def my_books(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All of the current user's books, whatever their state."""
    return book_list_envelope(book_service.list_owner_books(current_user, db))


@router.get("/code/{code}", response_model=BookEnvelope)
async def get_book_by_code(
    code: str,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Look up a book by its public code."""
    return book_envelope(book_service.get_book_by_code(code, current_user, db))


@router.get("/{book_id}", response_model=BookEnvelope)
async def get_book(
    book_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Get a single book."""
    return book_envelope(book_service.get_visible_book(book_id, current_user, db))


@router.post("", response_model=BookEnvelope, status_code=status.HTTP_201_CREATED)
async def create_book(
    title: str = Form(""),
    author: str = Form(""),
    description: str = Form(""),
    image_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a listing. It stays hidden from the public until an admin approves it."""
    stored_image = await resolve_image(image, image_url)
    try:
        book = book_service.create_book(current_user, title, author, description, stored_image, db)
    except ServiceError:
        storage_service.release_image(stored_image if stored_image != image_url else None)
        raise
    return book_envelope(book)


@router.put("/{book_id}", response_model=BookEnvelope)
async def update_book(
    book_id: int,
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    book_status: Optional[str] = Form(None, alias="status"),
    image_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the fields that were sent. Owner or admin only."""
    stored_image = await resolve_image(image, image_url)
    patch = {
        "title": title,
        "author": author,
        "description": description,
        "status": book_status,
        "image": stored_image,
    }
    try:
        book = book_service.update_book(book_id, patch, current_user, db)
    except ServiceError:
        storage_service.release_image(stored_image if stored_image != image_url else None)
        raise
    return book_envelope(book)


@router.delete("/{book_id}", response_model=MessageEnvelope)
async def delete_book(
    book_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a book; pending swap requests involving it are rejected."""
    book_service.delete_book(book_id, current_user, db)
    return MessageEnvelope(message="Book deleted")
