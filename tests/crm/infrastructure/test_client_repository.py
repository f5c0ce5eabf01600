from datetime import datetime, timedelta, UTC
from uuid import uuid4

import pytest

from src.crm.core.domain.models import Client, ClientListQuery


BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def make_client(first_name, last_name, email, minutes=0, **kwargs) -> Client:
    created_at = BASE_TIME + timedelta(minutes=minutes)
    return Client(
        id=uuid4(),
        first_name=first_name,
        last_name=last_name,
        email=email,
        created_at=created_at,
        updated_at=created_at,
        **kwargs,
    )


async def persist(unit_of_work, *clients: Client):
    async with unit_of_work:
        for client in clients:
            unit_of_work.add(client)


@pytest.fixture
def sample_clients():
    return [
        make_client("John", "Smith", "john.smith@example.com", 0, phone="555-123-4567", company="Acme Corp"),
        make_client("Amy", "Pond", "amy.pond@example.com", 1, company="TARDIS Ltd"),
        make_client("Rory", "Williams", "rory@example.com", 2, is_active=False),
        make_client("Clara", "Oswald", "clara@example.com", 3, phone="212-555-0101"),
        make_client("Adam", "Smith", "adam.smith@example.com", 4, company="acme labs"),
    ]


@pytest.mark.asyncio
async def test_get_client_by_id(client_repository, unit_of_work):
    # Arrange
    client = make_client("John", "Doe", "john.doe@example.com", phone="555-000-1111", city="Chicago")
    await persist(unit_of_work, client)

    # Act
    retrieved = await client_repository.get_by_id(client.id)

    # Assert
    assert retrieved is not None
    assert retrieved.id == client.id
    assert retrieved.email == "john.doe@example.com"
    assert retrieved.phone == "555-000-1111"
    assert retrieved.city == "Chicago"
    assert retrieved.is_active is True
    assert retrieved.created_at == client.created_at
    assert retrieved.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_get_client_by_id_not_found(client_repository):
    assert await client_repository.get_by_id(uuid4()) is None


@pytest.mark.asyncio
async def test_email_exists_can_exclude_own_record(client_repository, unit_of_work):
    client = make_client("Jane", "Doe", "jane.doe@example.com")
    await persist(unit_of_work, client)

    assert await client_repository.email_exists("jane.doe@example.com") is True
    assert await client_repository.email_exists("jane.doe@example.com", exclude_id=client.id) is False
    assert await client_repository.email_exists("other@example.com") is False


@pytest.mark.asyncio
async def test_list_default_order_is_last_then_first_name(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    items, total = await client_repository.list_clients(ClientListQuery.from_params())

    assert total == 5
    assert [(c.last_name, c.first_name) for c in items] == [
        ("Oswald", "Clara"),
        ("Pond", "Amy"),
        ("Smith", "Adam"),
        ("Smith", "John"),
        ("Williams", "Rory"),
    ]


@pytest.mark.asyncio
async def test_list_unknown_sort_desc_uses_compound_key(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    items, _ = await client_repository.list_clients(
        ClientListQuery.from_params(sort="phone", direction="DESC")
    )

    assert [(c.last_name, c.first_name) for c in items][:3] == [
        ("Williams", "Rory"),
        ("Smith", "John"),
        ("Smith", "Adam"),
    ]


@pytest.mark.asyncio
async def test_list_sort_by_first_name_desc(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    items, _ = await client_repository.list_clients(
        ClientListQuery.from_params(sort="firstName", direction="desc")
    )

    assert [c.first_name for c in items] == ["Rory", "John", "Clara", "Amy", "Adam"]


@pytest.mark.asyncio
async def test_list_sort_by_created_at(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *reversed(sample_clients))

    items, _ = await client_repository.list_clients(ClientListQuery.from_params(sort="createdAt"))

    assert [c.email for c in items] == [c.email for c in sample_clients]


@pytest.mark.asyncio
async def test_list_term_matches_name_case_insensitively(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    items, total = await client_repository.list_clients(ClientListQuery.from_params(query="JOHN"))

    assert total == 1
    assert [c.first_name for c in items] == ["John"]


@pytest.mark.asyncio
async def test_list_term_matches_company_and_email(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    items, total = await client_repository.list_clients(ClientListQuery.from_params(query="acme"))
    assert total == 2
    assert {c.first_name for c in items} == {"John", "Adam"}

    items, total = await client_repository.list_clients(ClientListQuery.from_params(query="rory@"))
    assert total == 1
    assert items[0].last_name == "Williams"


@pytest.mark.asyncio
async def test_list_term_matches_partial_phone(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    items, total = await client_repository.list_clients(ClientListQuery.from_params(query="555-01"))

    assert total == 1
    assert items[0].first_name == "Clara"


@pytest.mark.asyncio
async def test_list_term_wildcards_are_literal(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    _, total = await client_repository.list_clients(ClientListQuery.from_params(query="%"))

    assert total == 0


@pytest.mark.asyncio
async def test_list_active_filter(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    inactive, inactive_total = await client_repository.list_clients(ClientListQuery.from_params(is_active=False))
    active, active_total = await client_repository.list_clients(ClientListQuery.from_params(is_active=True))

    assert inactive_total == 1
    assert inactive[0].first_name == "Rory"
    assert active_total == 4


@pytest.mark.asyncio
async def test_list_active_filter_combines_with_term(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    _, total = await client_repository.list_clients(
        ClientListQuery.from_params(query="williams", is_active=True)
    )

    assert total == 0


@pytest.mark.asyncio
async def test_list_total_is_counted_before_paging(client_repository, unit_of_work, sample_clients):
    await persist(unit_of_work, *sample_clients)

    page_one, total_one = await client_repository.list_clients(ClientListQuery.from_params(page=1, page_size=2))
    page_three, total_three = await client_repository.list_clients(ClientListQuery.from_params(page=3, page_size=2))
    beyond, total_beyond = await client_repository.list_clients(ClientListQuery.from_params(page=9, page_size=2))

    assert total_one == total_three == total_beyond == 5
    assert [c.first_name for c in page_one] == ["Clara", "Amy"]
    assert [c.first_name for c in page_three] == ["Rory"]
    assert beyond == []


@pytest.mark.asyncio
async def test_update_and_delete_through_unit_of_work(client_repository, unit_of_work):
    client = make_client("John", "Doe", "john.doe@example.com")
    await persist(unit_of_work, client)

    client.company = "New Co"
    async with unit_of_work:
        await unit_of_work.update(client)
    assert (await client_repository.get_by_id(client.id)).company == "New Co"

    async with unit_of_work:
        await unit_of_work.delete(client)
    assert await client_repository.get_by_id(client.id) is None
    assert await client_repository.count_all() == 0
