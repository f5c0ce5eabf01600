import abc
from typing import Generic, TypeVar, Optional

from sqlalchemy import Executable, Select, func, select

from src.shared.database.base_mapper import BaseEntityMapper
from src.shared.database.database import Database


TEntity = TypeVar("TEntity")
TModel = TypeVar("TModel")


class BaseRepository(abc.ABC, Generic[TEntity, TModel]):
    def __init__(self, db: Database, mapper: BaseEntityMapper[TModel, TEntity]):
        self.db = db
        self.mapper = mapper

    async def find_one(self, statement: Executable) -> Optional[TModel]:
        async with self.db.session_maker() as session:
            result = await session.execute(statement)
            entity = result.scalar_one_or_none()
            if entity is None:
                return None
            return self.mapper.to_model(entity)

    async def find_all(self, statement: Executable) -> list[TModel]:
        async with self.db.session_maker() as session:
            result = await session.execute(statement)
            entities = list(result.scalars().all())
            return [self.mapper.to_model(entity) for entity in entities]

    async def exists(self, statement: Select) -> bool:
        async with self.db.session_maker() as session:
            result = await session.execute(statement.limit(1))
            return result.first() is not None

    async def count(self, statement: Select) -> int:
        """
        Count the rows a select statement would return.

        Ordering and paging on the statement are stripped so the count always
        reflects the full filtered set.

        Args:
            statement: SQLAlchemy select statement (filters already applied)

        Returns:
            Number of matching rows
        """
        count_stmt = select(func.count()).select_from(
            statement.order_by(None).limit(None).offset(None).subquery()
        )
        async with self.db.session_maker() as session:
            result = await session.execute(count_stmt)
            return int(result.scalar_one())
