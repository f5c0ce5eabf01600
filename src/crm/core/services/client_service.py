"""Client service orchestrating validation, persistence and contact sync."""
import logging
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError

from src.crm.config import ListingSettings
from src.crm.core.domain.models import Client, ClientListQuery, ClientPage, utc_now
from src.crm.core.validation import validate_client_payload
from src.crm.infrastructure.client_repository import ClientRepository
from src.crm.infrastructure.loops_client import LoopsClient
from src.crm_client.schemas import ClientPayload, CreateClientRequest, UpdateClientRequest
from src.shared.background import BackgroundTaskRunner
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.exceptions import EntityNotFound, ConflictingEntityFound, ValidationFailed

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    """Treat empty optional strings as absent."""
    return value if value else None


class ClientService:
    """Service for handling Client business logic."""

    def __init__(
        self,
        repository: ClientRepository,
        unit_of_work: UnitOfWork,
        loops_client: LoopsClient,
        background_runner: BackgroundTaskRunner,
        listing_settings: ListingSettings | None = None,
    ):
        """
        Initialize the client service.

        Args:
            repository: Repository for client reads and listing
            unit_of_work: Unit of work for database writes
            loops_client: Email-marketing sync client, called after create
            background_runner: Owner of detached tasks (the contact sync)
            listing_settings: Page size defaults and limits for listings
        """
        self.repository = repository
        self.unit_of_work = unit_of_work
        self.loops_client = loops_client
        self.background_runner = background_runner
        self.listing_settings = listing_settings or ListingSettings()

    @staticmethod
    def _validate(request: ClientPayload) -> None:
        errors = validate_client_payload(request)
        if errors:
            raise ValidationFailed(errors)

    async def list_clients(
        self,
        term: str | None = None,
        is_active: bool | None = None,
        sort: str = "lastName",
        direction: str = "asc",
        page: int = 1,
        page_size: int = 10,
    ) -> ClientPage:
        """
        List one page of clients.

        Paging values out of range are corrected, never rejected, and the
        corrected values are what the page reports.

        Args:
            term: Free-text search term
            is_active: Optional active-flag filter
            sort: Sort name as the caller sent it, echoed back
            direction: Direction as the caller sent it, echoed back
            page: Requested 1-based page
            page_size: Requested page size

        Returns:
            ClientPage with items, total and the effective paging values
        """
        query = ClientListQuery.from_params(
            query=term,
            is_active=is_active,
            sort=sort,
            direction=direction,
            page=page,
            page_size=page_size,
            default_page_size=self.listing_settings.default_page_size,
            max_page_size=self.listing_settings.max_page_size,
        )
        items, total = await self.repository.list_clients(query)
        return ClientPage(
            items=items,
            total=total,
            page=query.page,
            page_size=query.page_size,
            sort=sort,
            dir=direction,
        )

    async def get_client(self, client_id: UUID) -> Client:
        """Get a client by ID."""
        client = await self.repository.get_by_id(client_id)
        if not client:
            raise EntityNotFound("Client", client_id)
        return client

    async def create_client(self, request: CreateClientRequest) -> Client:
        """
        Create a new client and schedule its sync to Loops.so.

        The sync runs as a detached task; its outcome never changes the result.

        Raises:
            ValidationFailed: If any field rule is broken
            ConflictingEntityFound: If the email is already used
        """
        self._validate(request)

        if await self.repository.email_exists(request.email):
            raise ConflictingEntityFound("Client", "email", request.email)

        now = utc_now()
        client = Client(
            id=uuid4(),
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=_clean(request.phone),
            company=_clean(request.company),
            address_line1=_clean(request.address_line1),
            address_line2=_clean(request.address_line2),
            city=_clean(request.city),
            state=_clean(request.state),
            postal_code=_clean(request.postal_code),
            country=_clean(request.country),
            is_active=request.is_active,
            created_at=now,
            updated_at=now,
        )

        # The unique index on email settles concurrent creates that both passed the check
        try:
            async with self.unit_of_work:
                self.unit_of_work.add(client)
        except IntegrityError as e:
            raise ConflictingEntityFound("Client", "email", request.email) from e

        logger.info("Created client %s", client.id)
        self._schedule_contact_sync(client)
        return client

    def _schedule_contact_sync(self, client: Client) -> None:
        self.background_runner.spawn(
            self._sync_contact(client.id, client.email, client.first_name, client.last_name),
            name=f"loops-sync-{client.id}",
        )

    async def _sync_contact(self, client_id: UUID, email: str, first_name: str, last_name: str) -> None:
        """Push a new client to Loops.so, logging instead of raising."""
        try:
            synced = await self.loops_client.create_contact(
                email=email,
                first_name=first_name,
                last_name=last_name,
                user_id=str(client_id),
            )
        except Exception as e:
            logger.error("Failed to sync contact to Loops.so for client %s: %s", client_id, e)
            return
        if not synced:
            logger.info("Contact for client %s was not synced to Loops.so", client_id)

    async def update_client(self, client_id: UUID, request: UpdateClientRequest) -> Client:
        """
        Replace every mutable field of a client.

        The id and created_at are kept; updated_at is refreshed.

        Raises:
            ValidationFailed: If any field rule is broken
            EntityNotFound: If the client does not exist
            ConflictingEntityFound: If the new email belongs to another client
        """
        self._validate(request)

        client = await self.repository.get_by_id(client_id)
        if not client:
            raise EntityNotFound("Client", client_id)

        if client.email != request.email and await self.repository.email_exists(
            request.email, exclude_id=client_id
        ):
            raise ConflictingEntityFound("Client", "email", request.email)

        client.first_name = request.first_name
        client.last_name = request.last_name
        client.email = request.email
        client.phone = _clean(request.phone)
        client.company = _clean(request.company)
        client.address_line1 = _clean(request.address_line1)
        client.address_line2 = _clean(request.address_line2)
        client.city = _clean(request.city)
        client.state = _clean(request.state)
        client.postal_code = _clean(request.postal_code)
        client.country = _clean(request.country)
        client.is_active = request.is_active
        client.touch()

        try:
            async with self.unit_of_work:
                await self.unit_of_work.update(client)
        except IntegrityError as e:
            raise ConflictingEntityFound("Client", "email", request.email) from e

        logger.info("Updated client %s", client.id)
        return client

    async def delete_client(self, client_id: UUID) -> None:
        """
        Permanently remove a client.

        Raises:
            EntityNotFound: If the client does not exist
        """
        client = await self.repository.get_by_id(client_id)
        if not client:
            raise EntityNotFound("Client", client_id)

        async with self.unit_of_work:
            await self.unit_of_work.delete(client)

        logger.info("Deleted client %s", client_id)
