"""
Book Pydantic Schemas

Handles ISBN validation and normalization; responses add the id.
"""

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_isbn(v: str) -> str:
    """
    Validate ISBN format.

    Accepts:
    - ISBN-10: 10 characters, last can be X
    - ISBN-13: 13 digits

    ISBNs can include hyphens, which we strip for storage.
    """
    cleaned = re.sub(r"[-\s]", "", v)

    if len(cleaned) == 10:
        if not re.match(r"^\d{9}[\dX]$", cleaned):
            raise ValueError(
                "Invalid ISBN-10 format. Must be 10 characters: "
                "9 digits followed by a digit or 'X'"
            )
    elif len(cleaned) == 13:
        if not cleaned.isdigit():
            raise ValueError("Invalid ISBN-13 format. Must be exactly 13 digits")
    else:
        raise ValueError(
            "ISBN must be either 10 or 13 characters (excluding hyphens)"
        )

    return cleaned


def _strip_required(v: str, field: str) -> str:
    if not v.strip():
        raise ValueError(f"{field} cannot be empty or whitespace")
    return v.strip()


class BookBase(BaseModel):
    """Base schema with shared book fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Author name",
        examples=["George Orwell"],
    )

    publish_date: date = Field(
        ...,
        description="Date of publication",
        examples=["1949-06-08"],
    )

    isbn: str = Field(
        ...,
        max_length=20,
        description="ISBN-10 or ISBN-13",
        examples=["978-0451524935", "0-06-112008-1"],
    )

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str) -> str:
        return _normalize_isbn(v)

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        return _strip_required(v, "Title")

    @field_validator("author")
    @classmethod
    def author_must_not_be_empty(cls, v: str) -> str:
        return _strip_required(v, "Author")


class BookCreate(BookBase):
    """
    Schema for creating (POST) or replacing (PUT) a book.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "publish_date": "1949-06-08",
        "isbn": "978-0451524935"
    }
    """


class BookUpdate(BaseModel):
    """
    Schema for updating an existing book.

    All fields are optional for PATCH-style updates.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=200)
    publish_date: date | None = None
    isbn: str | None = Field(default=None, max_length=20)

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _normalize_isbn(v)

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v, "Title")

    @field_validator("author")
    @classmethod
    def author_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v, "Author")


class BookResponse(BaseModel):
    """Book as returned by the API."""

    id: int = Field(..., description="Unique book identifier")
    title: str
    author: str
    publish_date: date
    isbn: str

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "1984",
                "author": "George Orwell",
                "publish_date": "1949-06-08",
                "isbn": "9780451524935",
            }
        },
    )
