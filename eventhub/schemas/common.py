"""Response envelope pieces shared by every resource."""
from typing import Optional
from pydantic import BaseModel


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
