"""Sample client data for development databases."""
import logging
import random
import uuid
from datetime import timedelta

from src.crm.core.domain.models import Client, utc_now
from src.crm.infrastructure.client_repository import ClientRepository
from src.shared.database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

FIRST_NAMES = ["John", "Jane", "Michael", "Sarah", "David", "Emma", "Robert", "Lisa", "James", "Mary"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez"]
COMPANIES = [
    "Acme Corp", "TechStart Inc", "Global Solutions", "Digital Ventures", "Innovate Labs",
    "Future Systems", "Smart Tech", "Data Dynamics", "Cloud Nine", "Quantum Software",
]
# City and state are picked by the same index
CITIES = [
    ("New York", "NY"), ("Los Angeles", "CA"), ("Chicago", "IL"), ("Houston", "TX"), ("Phoenix", "AZ"),
    ("Philadelphia", "PA"), ("San Antonio", "TX"), ("San Diego", "CA"), ("Dallas", "TX"), ("San Jose", "CA"),
]


def generate_sample_clients(count: int, seed: int = 42) -> list[Client]:
    """
    Build a reproducible list of fake clients.

    Emails embed the running index so they stay unique. Roughly half the
    clients get a phone, a company and a second address line; about one in
    five is inactive.

    Args:
        count: Number of clients to generate
        seed: Seed for the random generator

    Returns:
        List of Client domain models, not yet persisted
    """
    rng = random.Random(seed)
    now = utc_now()
    clients = []

    for i in range(1, count + 1):
        first_name = rng.choice(FIRST_NAMES)
        last_name = rng.choice(LAST_NAMES)
        city, state = rng.choice(CITIES)
        created_at = now - timedelta(days=rng.randrange(365), seconds=rng.randrange(86400))
        updated_at = max(created_at, now - timedelta(days=rng.randrange(30)))

        clients.append(
            Client(
                id=uuid.UUID(int=rng.getrandbits(128), version=4),
                first_name=first_name,
                last_name=last_name,
                email=f"{first_name.lower()}.{last_name.lower()}{i}@example.com",
                phone=(
                    f"{rng.randint(200, 999)}-{rng.randint(200, 999)}-{rng.randint(1000, 9999)}"
                    if rng.random() < 0.5 else None
                ),
                company=rng.choice(COMPANIES) if rng.random() < 0.5 else None,
                address_line1=f"{rng.randint(1, 9999)} Main Street",
                address_line2=f"Suite {rng.randint(100, 999)}" if rng.random() < 0.5 else None,
                city=city,
                state=state,
                postal_code=str(rng.randint(10000, 99999)),
                country="USA",
                is_active=rng.random() >= 0.2,
                created_at=created_at,
                updated_at=updated_at,
            )
        )

    return clients


async def seed_sample_clients(
    repository: ClientRepository,
    unit_of_work: UnitOfWork,
    count: int,
    seed: int = 42,
) -> int:
    """
    Insert sample clients when the clients table is empty.

    Returns:
        Number of clients inserted (0 when the table already had rows)
    """
    existing = await repository.count_all()
    if existing:
        logger.info("Skipping sample data, %d clients already present", existing)
        return 0

    clients = generate_sample_clients(count, seed)
    async with unit_of_work:
        for client in clients:
            unit_of_work.add(client)

    logger.info("Seeded %d sample clients", len(clients))
    return len(clients)
