from pydantic import BaseModel
from typing import Optional

class Envelope(BaseModel):
    """Fields shared by every API response."""
    success: bool = True
    message: Optional[str] = None

class MessageResponse(Envelope):
    pass
