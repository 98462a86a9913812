"""
User Pydantic Schemas

Schemas:
- UserCreate: Data to register (POST) or replace (PUT) a member
- UserUpdate: Partial profile update (PATCH)
- UserResponse: Member data returned by the API

EmailStr (from email-validator) rejects malformed addresses at the
schema level; uniqueness is checked by the users service.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Base schema with shared user fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Full name",
        examples=["Jane Doe"],
    )

    address: str | None = Field(
        default=None,
        max_length=500,
        description="Postal address",
        examples=["12 Library Lane, Springfield"],
    )

    email: EmailStr = Field(
        ...,
        description="Contact email address",
        examples=["jane@example.com"],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class UserCreate(UserBase):
    """Schema for registering or replacing a user."""


class UserUpdate(BaseModel):
    """
    Schema for updating a user.

    All fields optional - only provided fields are updated.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class UserResponse(BaseModel):
    """User as returned by the API."""

    id: int = Field(..., description="Unique user identifier")
    name: str
    address: str | None = None
    email: str

    model_config = ConfigDict(from_attributes=True)
