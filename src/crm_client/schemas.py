"""API schemas for client requests and responses."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys, populated by either name."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientPayload(CamelModel):
    """
    Writable client fields shared by create and update.

    Every text field is optional at the schema level; required-ness and length
    rules are checked by the validation layer so all violations are reported together.
    """
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    is_active: bool = True


class CreateClientRequest(ClientPayload):
    """Request schema for creating a new client."""


class UpdateClientRequest(ClientPayload):
    """Request schema for replacing every mutable field of a client."""


class ClientResponse(CamelModel):
    """Response schema for full client detail returned by the API."""
    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ClientListItemResponse(CamelModel):
    """Summary of a client as it appears in a listing."""
    id: UUID
    first_name: str
    last_name: str
    email: str
    company: str | None = None
    is_active: bool
    created_at: datetime


class ClientListResponse(CamelModel):
    """One page of the client listing with the echoed paging and sort parameters."""
    items: list[ClientListItemResponse]
    total: int = Field(..., ge=0, description="Matching clients before pagination")
    page: int
    page_size: int
    sort: str
    dir: str


class MessageResponse(BaseModel):
    """Error body for not-found and conflict responses."""
    message: str


class ValidationErrorResponse(BaseModel):
    """Error body for rejected payloads: field name to messages."""
    errors: dict[str, list[str]]
