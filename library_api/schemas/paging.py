"""
Paging Schemas

Every listing endpoint returns an Envelope: one page of items plus the
metadata a client needs to walk the rest.

Example response:
{
    "items": [...],
    "paging": {
        "page_count": 3,
        "page_size": 10,
        "page_max_size": 10,
        "page_number": 1,
        "total_number_of_items": 25
    }
}
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Paging(BaseModel):
    """Pagination metadata for one page of a listing."""

    page_count: int = Field(..., ge=0, description="Number of pages")
    page_size: int = Field(..., ge=0, description="Items actually on this page")
    page_max_size: int = Field(..., ge=1, description="Maximum items per page")
    page_number: int = Field(..., description="Current page (1-indexed)")
    total_number_of_items: int = Field(..., ge=0, description="Items across all pages")


class Envelope(BaseModel, Generic[T]):
    """A page of items together with its Paging."""

    items: list[T] = Field(default_factory=list, description="Items on this page")
    paging: Paging
