"""Dependency injection container using dependency-injector library."""
from dependency_injector import containers, providers

from src.crm.config import Settings
from src.shared.background import BackgroundTaskRunner
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.database.entity_mapper import EntityMapper

from src.crm.infrastructure.mappers.client_mapper import ClientMapper
from src.crm.infrastructure.client_repository import ClientRepository
from src.crm.infrastructure.loops_client import LoopsClient, create_loops_http_client

from src.crm.core.services.client_service import ClientService

from src.crm.core.domain.models import Client


def create_entity_mapper(client_mapper: ClientMapper) -> EntityMapper:
    """Factory function to create EntityMapper with proper mappings."""
    return EntityMapper(
        entity_mappings={
            Client: client_mapper.to_entity,
        }
    )


class Container(containers.DeclarativeContainer):
    """Main application dependency injection container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "src.crm.api.routers.clients",
        ]
    )

    # =========================================================================
    # CONFIGURATION - Singleton (loaded once, cached)
    # =========================================================================
    config = providers.Singleton(Settings)

    # =========================================================================
    # SINGLETONS - Stateless Mappers (reusable across all requests)
    # =========================================================================
    client_mapper = providers.Singleton(ClientMapper)

    entity_mapper = providers.Singleton(
        create_entity_mapper,
        client_mapper=client_mapper,
    )

    # =========================================================================
    # SINGLETON - Database (shared connection pool)
    # =========================================================================
    database_settings = providers.Singleton(
        DatabaseSettings,
        db_url=config.provided.database_url,
    )

    database = providers.Singleton(
        Database,
        db_settings=database_settings,
    )

    # =========================================================================
    # SINGLETONS - Loops.so sync (pooled HTTP client) and detached task owner
    # Both outlive individual requests; the lifespan closes and drains them.
    # =========================================================================
    loops_http_client = providers.Singleton(
        create_loops_http_client,
        settings=config.provided.loops,
    )

    loops_client = providers.Singleton(
        LoopsClient,
        settings=config.provided.loops,
        http_client=loops_http_client,
    )

    background_runner = providers.Singleton(
        BackgroundTaskRunner,
        shutdown_timeout_seconds=config.provided.background.shutdown_timeout_seconds,
    )

    # =========================================================================
    # FACTORIES - Repositories (per-request, share database singleton)
    # =========================================================================
    client_repository = providers.Factory(
        ClientRepository,
        db=database,
        mapper=client_mapper,
    )

    # =========================================================================
    # FACTORY - Unit of Work (per-request)
    # =========================================================================
    unit_of_work = providers.Factory(
        UnitOfWork,
        db=database,
        entity_mapper=entity_mapper,
    )

    # =========================================================================
    # FACTORIES - Services
    # =========================================================================
    client_service = providers.Factory(
        ClientService,
        repository=client_repository,
        unit_of_work=unit_of_work,
        loops_client=loops_client,
        background_runner=background_runner,
        listing_settings=config.provided.listing,
    )
