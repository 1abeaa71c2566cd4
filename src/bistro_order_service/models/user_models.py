"""Identity and credential models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from bistro_order_service.models.base import CamelModel, StoredModel


class Role(str, Enum):
    """Enumeration of identity roles."""

    STANDARD = "standard"
    ADMIN = "admin"


class User(StoredModel):
    """A registered identity.

    Stored in DynamoDB with ``email`` as the partition key so that a second
    registration of the same address cannot create a duplicate record.
    """

    email: str = Field(..., description="Unique email address")
    name: str | None = Field(None, description="Display name")
    photo_url: str | None = Field(None, description="Profile picture URL")
    role: Role = Field(default=Role.STANDARD, description="Access role")
    created_at: datetime | None = Field(None, description="Registration timestamp")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserCreate(CamelModel):
    """Registration payload. Roles cannot be chosen by the caller."""

    email: str = Field(..., min_length=3, description="Email address")
    name: str | None = Field(None, description="Display name")
    photo_url: str | None = Field(None, description="Profile picture URL")


class TokenRequest(CamelModel):
    """Identity descriptor presented to the credential issuer."""

    email: str = Field(..., min_length=1, description="Email to embed in the credential")


class TokenResponse(CamelModel):
    token: str


class AdminStatusResponse(CamelModel):
    admin: bool
