from uuid import UUID
from typing import Optional
from sqlalchemy import Select, select, or_

from src.crm.core.domain.models import Client, ClientListQuery, SortDirection, SortField
from src.shared.database.base_repo import BaseRepository
from src.shared.database.database import Database

from src.crm.infrastructure.entities.client_entity import ClientEntity
from src.crm.infrastructure.mappers.client_mapper import ClientMapper


def _like_pattern(term: str) -> str:
    """Wrap a search term for a substring LIKE, escaping wildcard characters."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _sort_columns(sort_field: SortField | None) -> list:
    """Map a sort field to the columns it orders by."""
    match sort_field:
        case SortField.FIRST_NAME:
            return [ClientEntity.first_name]
        case SortField.LAST_NAME:
            return [ClientEntity.last_name]
        case SortField.EMAIL:
            return [ClientEntity.email]
        case SortField.COMPANY:
            return [ClientEntity.company]
        case SortField.CREATED_AT:
            return [ClientEntity.created_at]
        case _:
            return [ClientEntity.last_name, ClientEntity.first_name]


class ClientRepository(BaseRepository[ClientEntity, Client]):
    """Repository for Client operations."""

    def __init__(self, db: Database, mapper: ClientMapper):
        super().__init__(db, mapper)

    async def get_by_id(self, client_id: UUID) -> Optional[Client]:
        """Get a client by ID."""
        return await self.find_one(
            select(ClientEntity).where(ClientEntity.id == client_id)
        )

    async def email_exists(self, email: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another client already uses this email."""
        stmt = select(ClientEntity.id).where(ClientEntity.email == email)
        if exclude_id is not None:
            stmt = stmt.where(ClientEntity.id != exclude_id)
        return await self.exists(stmt)

    async def count_all(self) -> int:
        return await self.count(select(ClientEntity.id))

    def _filtered(self, query: ClientListQuery) -> Select:
        """
        Apply the active-flag and search-term filters of a listing query.

        The term matches case-insensitively as a substring of first name, last
        name, email or company, and as a plain substring of phone.
        """
        stmt = select(ClientEntity)

        if query.is_active is not None:
            stmt = stmt.where(ClientEntity.is_active == query.is_active)

        if query.term:
            pattern = _like_pattern(query.term)
            stmt = stmt.where(
                or_(
                    ClientEntity.first_name.ilike(pattern, escape="\\"),
                    ClientEntity.last_name.ilike(pattern, escape="\\"),
                    ClientEntity.email.ilike(pattern, escape="\\"),
                    ClientEntity.phone.like(pattern, escape="\\"),
                    ClientEntity.company.ilike(pattern, escape="\\"),
                )
            )

        return stmt

    async def list_clients(self, query: ClientListQuery) -> tuple[list[Client], int]:
        """
        Return one page of clients and the total number of matches.

        Steps run in order: filter, count (before paging), sort, paginate.
        Every ordering ends with created_at then id ascending so equal sort
        keys keep insertion order and pages never overlap.

        Args:
            query: Normalised listing parameters

        Returns:
            Tuple of (clients on the requested page, total matching clients)
        """
        stmt = self._filtered(query)
        total = await self.count(stmt)

        columns = _sort_columns(query.sort_field)
        if query.sort_direction == SortDirection.DESC:
            order_by = [column.desc() for column in columns]
        else:
            order_by = [column.asc() for column in columns]

        stmt = (
            stmt.order_by(*order_by, ClientEntity.created_at.asc(), ClientEntity.id.asc())
            .offset(query.offset)
            .limit(query.page_size)
        )
        items = await self.find_all(stmt)
        return items, total
