"""
Swap request routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from bookswap.db.session import get_db
from bookswap.models.swap import SwapRequest
from bookswap.models.user import User
from bookswap.schemas.swap import (
    SwapAction, SwapCreate, SwapEnvelope, SwapListEnvelope, SwapResponse
)
from bookswap.services import swap_service
from bookswap.api.dependencies import get_current_user

router = APIRouter(prefix="/swaps", tags=["swaps"])


def swap_envelope(swap: SwapRequest) -> SwapEnvelope:
    return SwapEnvelope(swap=SwapResponse.model_validate(swap))


def swap_list_envelope(swaps) -> SwapListEnvelope:
    return SwapListEnvelope(swaps=[SwapResponse.model_validate(s) for s in swaps])


@router.post("/request", response_model=SwapEnvelope, status_code=status.HTTP_201_CREATED)
async def request_swap(
    swap_data: SwapCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Offer one of your books in exchange for someone else's approved book."""
    swap = swap_service.request_swap(
        swap_data.book_id,
        swap_data.offered_book_id,
        current_user,
        message=swap_data.message,
        db=db
    )
    return swap_envelope(swap)


@router.get("/mine", response_model=SwapListEnvelope)
async def my_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Requests you sent, newest first."""
    return swap_list_envelope(swap_service.list_requests_by_requester(current_user, db))


@router.get("/incoming", response_model=SwapListEnvelope)
async def incoming_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Requests for your books, newest first."""
    return swap_list_envelope(swap_service.list_requests_by_owner(current_user, db))


@router.get("/{swap_id}", response_model=SwapEnvelope)
async def get_swap(
    swap_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a swap request you are part of."""
    return swap_envelope(swap_service.get_visible_swap(swap_id, current_user, db))


@router.patch("/{swap_id}", response_model=SwapEnvelope)
async def update_swap_status(
    swap_id: int,
    body: SwapAction,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Resolve a request with {"action": "approve" | "reject" | "cancel"}."""
    return swap_envelope(swap_service.resolve_swap(swap_id, body.action, current_user, db))


@router.post("/{swap_id}/{action}", response_model=SwapEnvelope)
async def resolve_swap(
    swap_id: int,
    action: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Approve, reject or cancel a request."""
    return swap_envelope(swap_service.resolve_swap(swap_id, action, current_user, db))
