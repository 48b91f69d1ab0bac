"""
Shared response schemas.
"""
from pydantic import BaseModel


class MessageEnvelope(BaseModel):
    """Schema for responses that only carry a message."""
    ok: bool = True
    message: str
