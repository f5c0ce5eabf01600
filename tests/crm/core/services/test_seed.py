import pytest

from src.crm.core.services.seed import generate_sample_clients, seed_sample_clients
from src.crm.core.validation import PHONE_PATTERN


def test_generate_sample_clients_is_reproducible():
    first = generate_sample_clients(20, seed=7)
    second = generate_sample_clients(20, seed=7)

    assert [c.id for c in first] == [c.id for c in second]
    assert [c.email for c in first] == [c.email for c in second]


def test_generate_sample_clients_produces_unique_valid_records():
    clients = generate_sample_clients(150)

    assert len(clients) == 150
    assert len({c.email for c in clients}) == 150
    assert len({c.id for c in clients}) == 150
    for client in clients:
        assert client.updated_at >= client.created_at
        if client.phone is not None:
            assert PHONE_PATTERN.fullmatch(client.phone)


@pytest.mark.asyncio
async def test_seed_inserts_into_empty_table(client_repository, unit_of_work):
    inserted = await seed_sample_clients(client_repository, unit_of_work, count=25)

    assert inserted == 25
    assert await client_repository.count_all() == 25


@pytest.mark.asyncio
async def test_seed_skips_when_clients_exist(client_repository, unit_of_work):
    await seed_sample_clients(client_repository, unit_of_work, count=5)

    inserted = await seed_sample_clients(client_repository, unit_of_work, count=25)

    assert inserted == 0
    assert await client_repository.count_all() == 5
