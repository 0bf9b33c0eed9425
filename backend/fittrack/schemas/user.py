"""
FitTrack Backend — User Request/Response Schemas
==================================================

The password travels in exactly one direction: in, on registration. No
response model has a password or hash field.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fittrack.domain.user import User


class UserUpdateIn(BaseModel):
    """Body of PUT /users/{id}."""
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=255)
    bio: str = Field(default="")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Cheap shape check; deliverability is not our concern."""
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("email must look like name@domain")
        return v


class UserCreateIn(UserUpdateIn):
    """Body of POST /users."""
    password: str = Field(min_length=1, description="Plaintext; hashed before storage")


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    bio: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            bio=user.bio,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
