from typing import Any

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from src.shared.database.database import Database
from src.shared.database.entity_mapper import EntityMapper
from src.shared.exceptions import EntityNotFound


class UnitOfWork:
    """Groups writes of domain models into a single committed transaction."""

    def __init__(
        self,
        db: Database,
        entity_mapper: EntityMapper,
    ) -> None:
        self.db = db
        self.session: AsyncSession
        self.entity_mapper = entity_mapper

    async def __aenter__(self):
        self.session = self.db.session_maker()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.session.close()

    def _map_to_entity(self, model_instance: Any):
        return self.entity_mapper.map_to_entity(model_instance)

    def add(self, model_instance: Any):
        entity = self._map_to_entity(model_instance)
        self.session.add(entity)

    async def _load_persistent(self, model_instance: Any):
        """Lock the stored row behind a model, raising EntityNotFound when it is gone."""
        entity = self._map_to_entity(model_instance)
        identity = tuple(inspect(type(entity)).primary_key_from_instance(entity))
        persistent = await self.session.get(type(entity), identity, with_for_update=True)
        if persistent is None:
            raise self._not_found(model_instance, identity)
        return entity, persistent, identity

    @staticmethod
    def _not_found(model_instance: Any, identity: tuple) -> EntityNotFound:
        return EntityNotFound(type(model_instance).__name__, identity[0] if len(identity) == 1 else identity)

    async def update(self, model_instance: Any):
        entity, _, identity = await self._load_persistent(model_instance)
        # merge only copies onto the loaded row, it never inserts here
        await self.session.merge(entity)
        try:
            await self.session.flush()
        except StaleDataError as e:
            raise self._not_found(model_instance, identity) from e

    async def delete(self, model_instance: Any):
        _, persistent, _ = await self._load_persistent(model_instance)
        await self.session.delete(persistent)

    async def commit(self):
        try:
            await self.session.commit()
        except Exception:
            await self.rollback()
            raise

    async def rollback(self):
        await self.session.rollback()
