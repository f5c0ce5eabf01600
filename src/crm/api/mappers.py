"""Mappers for converting between domain models and API schemas."""
from src.crm.core.domain.models import Client, ClientPage
from src.crm_client.schemas import (
    ClientListItemResponse,
    ClientListResponse,
    ClientResponse,
)


def to_client_response(client: Client) -> ClientResponse:
    """
    Convert a Client domain model to ClientResponse API schema.

    Args:
        client: Domain model

    Returns:
        API response schema with every client field
    """
    return ClientResponse(
        id=client.id,
        first_name=client.first_name,
        last_name=client.last_name,
        email=client.email,
        phone=client.phone,
        company=client.company,
        address_line1=client.address_line1,
        address_line2=client.address_line2,
        city=client.city,
        state=client.state,
        postal_code=client.postal_code,
        country=client.country,
        is_active=client.is_active,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


def to_client_list_item_response(client: Client) -> ClientListItemResponse:
    return ClientListItemResponse(
        id=client.id,
        first_name=client.first_name,
        last_name=client.last_name,
        email=client.email,
        company=client.company,
        is_active=client.is_active,
        created_at=client.created_at,
    )


def to_client_list_response(page: ClientPage) -> ClientListResponse:
    """
    Convert a ClientPage to the listing API schema.

    Args:
        page: One page of clients with its paging metadata

    Returns:
        API response schema with summaries and echoed paging/sort values
    """
    return ClientListResponse(
        items=[to_client_list_item_response(client) for client in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        sort=page.sort,
        dir=page.dir,
    )
