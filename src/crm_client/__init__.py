"""Typed async client for the CRM API."""
from src.crm_client.crm_client import CrmClient
from src.crm_client.schemas import (
    ClientListItemResponse,
    ClientListResponse,
    ClientResponse,
    CreateClientRequest,
    UpdateClientRequest,
)

__all__ = [
    "CrmClient",
    "ClientListItemResponse",
    "ClientListResponse",
    "ClientResponse",
    "CreateClientRequest",
    "UpdateClientRequest",
]
