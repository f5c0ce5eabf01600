"""Domain models used in business logic."""
import uuid
from datetime import datetime, timedelta, UTC
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(UTC)


class Client(BaseModel):
    """Domain model for Client used in business logic."""
    id: UUID = Field(default_factory=uuid.uuid4, description="Unique client ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email address, unique across clients")
    phone: str | None = None
    company: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp")

    model_config = {"from_attributes": True}

    def touch(self) -> None:
        """Refresh updated_at, keeping it strictly after the previous value."""
        now = utc_now()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now


# =============================================================================
# Listing Types
# =============================================================================

class SortField(StrEnum):
    """
    Columns a client listing can be ordered by.

    Values are the wire names accepted in the ``sort`` query parameter.
    """
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    COMPANY = "company"
    CREATED_AT = "createdAt"

    @classmethod
    def parse(cls, value: str | None) -> "SortField | None":
        """Match a sort name case-insensitively; None means use the default ordering."""
        if not value:
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortDirection":
        """Only an explicit 'desc' (any case) sorts descending."""
        if value and value.strip().lower() == cls.DESC.value:
            return cls.DESC
        return cls.ASC


class ClientListQuery(BaseModel):
    """
    Normalised parameters for one page of the client listing.

    Built with ``from_params`` so out-of-range paging is corrected, never rejected.
    """
    term: str | None = None
    is_active: bool | None = None
    sort_field: SortField | None = None
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1
    page_size: int = 10

    model_config = {"frozen": True}

    @classmethod
    def from_params(
        cls,
        query: str | None = None,
        is_active: bool | None = None,
        sort: str | None = None,
        direction: str | None = None,
        page: int = 1,
        page_size: int = 10,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ) -> "ClientListQuery":
        """
        Build a query from raw request values.

        Args:
            query: Free-text search term; blank means no filter
            is_active: Restrict to active or inactive clients when set
            sort: Sort field name, unknown names fall back to last name, first name
            direction: 'desc' for descending, anything else ascending
            page: 1-based page number, values below 1 become 1
            page_size: Items per page, values outside [1, max_page_size] become default_page_size
            default_page_size: Replacement for out-of-range page sizes
            max_page_size: Largest accepted page size

        Returns:
            The normalised ClientListQuery
        """
        term = query.strip() if query else None
        if page < 1:
            page = 1
        if page_size < 1 or page_size > max_page_size:
            page_size = default_page_size
        return cls(
            term=term or None,
            is_active=is_active,
            sort_field=SortField.parse(sort),
            sort_direction=SortDirection.parse(direction),
            page=page,
            page_size=page_size,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class ClientPage(BaseModel):
    """One page of clients plus the size of the whole filtered set."""
    items: list[Client]
    total: int
    page: int
    page_size: int
    sort: str
    dir: str
