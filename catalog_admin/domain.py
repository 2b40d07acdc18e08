"""Core data structures for the catalog admin service."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """The only distinction the service draws is admin versus everyone else."""

    ADMIN = 'admin'


class Identity(BaseModel):
    """A user record as reported by the identity provider."""

    id: str
    """Provider user id; the ``supabase_id`` of the matching profile."""

    email: Optional[str] = None


class ProviderSession(BaseModel):
    """Result of a successful password grant."""

    access_token: str
    expires_in: int
    """Session lifetime in seconds, as reported by the provider."""

    user: Identity


class Profile(BaseModel):
    """Locally stored role attribute of an identity."""

    model_config = ConfigDict(from_attributes=True)

    supabase_id: str
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


class Authorization(BaseModel):
    """A request that passed the gateway."""

    identity: Identity
    role: str


class Credentials(BaseModel):
    email: str = ''
    password: str = ''


class ProductFields(BaseModel):
    """Writable product fields.

    Nothing is required: an absent field is stored as null on create and
    left untouched on update.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    images: Optional[Any] = None
    price: Optional[float] = None


class Product(BaseModel):
    """A product as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    images: Optional[Any] = None
    price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Overview(BaseModel):
    """Statistics derived from the whole product collection."""

    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(0, alias='totalProducts')
    active_products: int = Field(0, alias='activeProducts')
    total_images: int = Field(0, alias='totalImages')
    last_updated: Optional[datetime] = Field(None, alias='lastUpdated')
