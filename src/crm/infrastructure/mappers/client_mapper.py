from datetime import datetime, UTC

from src.shared.database.base_mapper import BaseEntityMapper
from src.crm.core.domain.models import Client
from src.crm.infrastructure.entities.client_entity import ClientEntity


def _as_utc(value: datetime) -> datetime:
    # Some backends (SQLite) hand back naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ClientMapper(BaseEntityMapper[Client, ClientEntity]):
    """Mapper for converting between Client domain model and ClientEntity."""

    @staticmethod
    def to_entity(model_instance: Client) -> ClientEntity:
        """Convert a Client (domain model) to ClientEntity (database entity)."""
        return ClientEntity(
            id=model_instance.id,
            first_name=model_instance.first_name,
            last_name=model_instance.last_name,
            email=model_instance.email,
            phone=model_instance.phone,
            company=model_instance.company,
            address_line1=model_instance.address_line1,
            address_line2=model_instance.address_line2,
            city=model_instance.city,
            state=model_instance.state,
            postal_code=model_instance.postal_code,
            country=model_instance.country,
            is_active=model_instance.is_active,
            created_at=model_instance.created_at,
            updated_at=model_instance.updated_at,
        )

    @staticmethod
    def to_model(entity: ClientEntity) -> Client:
        """Convert a ClientEntity (database entity) to Client (domain model)."""
        return Client(
            id=entity.id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            email=entity.email,
            phone=entity.phone,
            company=entity.company,
            address_line1=entity.address_line1,
            address_line2=entity.address_line2,
            city=entity.city,
            state=entity.state,
            postal_code=entity.postal_code,
            country=entity.country,
            is_active=entity.is_active,
            created_at=_as_utc(entity.created_at),
            updated_at=_as_utc(entity.updated_at),
        )
