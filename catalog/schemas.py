from pydantic import BaseModel
from typing import List, Optional
from catalog.models import Product


class PaginatedResponse(BaseModel):
    """Model for the list endpoint response."""
    page: int
    page_size: int
    total_items: int
    total_pages: int
    time: float
    data: List[Product]


class RejectedRow(BaseModel):
    row: int
    reason: str


class BulkImportResponse(BaseModel):
    status: str
    imported_count: int = 0
    rejected: List[RejectedRow] = []
    message: Optional[str] = None
    timeTaken_ms: float
