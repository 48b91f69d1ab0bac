"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from bookswap.api.routes import auth, books, swaps, admin

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(books.router)
api_router.include_router(swaps.router)
api_router.include_router(admin.router)
