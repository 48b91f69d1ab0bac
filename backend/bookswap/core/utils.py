"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
import re
import secrets
import string

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
_CODE_ALPHABET = string.ascii_uppercase + string.digits


def format_response(**payload: Any) -> Dict[str, Any]:
    """Format API response."""
    return {"ok": True, **payload}


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"ok": False, "error": message}
    if details:
        response["details"] = details
    return response


def generate_public_code(prefix: str = "BK", length: int = 6) -> str:
    """Generate a short human-readable code, e.g. BK-3F7A2C."""
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))
    return f"{prefix}-{suffix}"


def is_absolute_url(value: str) -> bool:
    return bool(_ABSOLUTE_URL.match(value))


def normalize_image_path(value: Optional[str]) -> Optional[str]:
    """
    Normalize a stored image reference.

    Absolute http(s) URLs are kept as-is. Anything else is treated as a path
    relative to the uploads directory and stored as "/uploads/<path>".
    """
    if not value:
        return None
    s = str(value).strip()
    if not s:
        return None
    if is_absolute_url(s):
        return s
    s = s.lstrip("/")
    if not s.startswith("uploads/"):
        s = f"uploads/{s}"
    return f"/{s}"


def build_image_url(image: Optional[str], base_url: str = "") -> Optional[str]:
    """Full URL for a stored image reference."""
    if not image:
        return None
    if is_absolute_url(image):
        return image
    return f"{base_url.rstrip('/')}{image}" if base_url else image
