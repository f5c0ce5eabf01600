"""Database entities for the infrastructure layer."""
from src.crm.infrastructure.entities.client_entity import ClientEntity

__all__ = [
    "ClientEntity",
]
