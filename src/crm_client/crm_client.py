"""CRM HTTP Client for consuming the CRM API."""
from uuid import UUID
from typing import Optional
from httpx import AsyncClient, Response

from src.crm_client.schemas import (
    ClientListResponse,
    ClientResponse,
    CreateClientRequest,
    UpdateClientRequest,
)

CLIENTS_PATH = "/api/clients"


class CrmClient:
    """HTTP client for interacting with the CRM API."""

    def __init__(self, base_url: str, client: Optional[AsyncClient] = None):
        """
        Initialize the CRM client.

        Args:
            base_url: Base URL of the CRM API (e.g., "http://localhost:8000")
            client: Optional httpx.AsyncClient instance. If not provided, a new one will be created.
        """
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self._owns_client:
            self._client = AsyncClient(base_url=self.base_url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._owns_client and self._client:
            await self._client.aclose()

    @property
    def client(self) -> AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    async def list_clients(
        self,
        query: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
        sort: str | None = None,
        direction: str | None = None,
        is_active: bool | None = None,
    ) -> ClientListResponse:
        """
        List clients with optional search, sort and paging.

        Args:
            query: Free-text search term
            page: 1-based page number
            page_size: Items per page
            sort: Sort field name (firstName, lastName, email, company, createdAt)
            direction: "asc" or "desc"
            is_active: Restrict to active or inactive clients

        Returns:
            One page of client summaries

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        params = {
            "query": query,
            "page": page,
            "pageSize": page_size,
            "sort": sort,
            "dir": direction,
            "isActive": None if is_active is None else str(is_active).lower(),
        }
        response: Response = await self.client.get(
            CLIENTS_PATH,
            params={key: value for key, value in params.items() if value is not None},
        )
        response.raise_for_status()
        return ClientListResponse.model_validate(response.json())

    async def get_client(self, client_id: UUID) -> ClientResponse:
        """
        Get a client by ID.

        Raises:
            httpx.HTTPStatusError: If the request fails (e.g., 404 if not found)
        """
        response: Response = await self.client.get(f"{CLIENTS_PATH}/{client_id}")
        response.raise_for_status()
        return ClientResponse.model_validate(response.json())

    async def create_client(self, request: CreateClientRequest) -> ClientResponse:
        """
        Create a new client.

        Raises:
            httpx.HTTPStatusError: If the request fails (400 invalid, 409 duplicate email)
        """
        response: Response = await self.client.post(
            CLIENTS_PATH,
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        response.raise_for_status()
        return ClientResponse.model_validate(response.json())

    async def update_client(self, client_id: UUID, request: UpdateClientRequest) -> ClientResponse:
        """
        Replace every mutable field of a client.

        Raises:
            httpx.HTTPStatusError: If the request fails (400, 404 or 409)
        """
        response: Response = await self.client.put(
            f"{CLIENTS_PATH}/{client_id}",
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        response.raise_for_status()
        return ClientResponse.model_validate(response.json())

    async def delete_client(self, client_id: UUID) -> None:
        """
        Delete a client.

        Raises:
            httpx.HTTPStatusError: If the request fails (e.g., 404 if not found)
        """
        response: Response = await self.client.delete(f"{CLIENTS_PATH}/{client_id}")
        response.raise_for_status()
