"""Seed the vehicles table.

Run ``python -m app.seed [path/to/vehicles.json]`` to clear the table and
reseed it. Without a path, ``SEED_FILE`` or the built-in fleet is used.
"""
import asyncio
import json
import logging
import sys
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.vehicle import Vehicle, VehicleStatus
from app.utils.timestamps import normalize_timestamp, utc_now

logger = logging.getLogger(__name__)

_SEED_START = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)

SEED_VEHICLES = [
    {
        "id": str(uuid.uuid5(uuid.NAMESPACE_DNS, f"vehicle-{i:03d}")),
        "licensePlate": f"{1000001 + i}",
        "status": VehicleStatus.AVAILABLE.value,
        "createdAt": (_SEED_START + timedelta(hours=i)).isoformat(),
    }
    for i in range(20)
]


def load_seed_file(path: str) -> list[dict]:
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Seed file {path} must contain a JSON array")
    return records


def _to_vehicle(record: dict) -> Vehicle:
    return Vehicle(
        id=record.get("id") or str(uuid.uuid4()),
        license_plate=str(record["licensePlate"]),
        status=VehicleStatus(record.get("status", VehicleStatus.AVAILABLE.value)),
        created_at=normalize_timestamp(record["createdAt"]) if record.get("createdAt") else utc_now(),
    )


def _default_records() -> list[dict]:
    if settings.seed_file:
        return load_seed_file(settings.seed_file)
    return SEED_VEHICLES


async def seed_data(session: AsyncSession, records: list[dict] | None = None) -> int:
    """Insert seed vehicles if the table is empty. Returns the number inserted."""
    result = await session.execute(select(Vehicle).limit(1))
    if result.scalars().first() is not None:
        return 0

    records = _default_records() if records is None else records
    for record in records:
        session.add(_to_vehicle(record))

    await session.commit()
    logger.info("Seeded %d vehicles", len(records))
    return len(records)


async def reseed(session: AsyncSession, records: list[dict] | None = None) -> int:
    await session.execute(delete(Vehicle))
    await session.commit()
    logger.info("Cleared existing vehicles")
    return await seed_data(session, records)


async def _main(path: str | None) -> None:
    from app.database import async_session, create_tables

    await create_tables()
    records = load_seed_file(path) if path else None
    async with async_session() as session:
        count = await reseed(session, records)
    logger.info("Database seeded successfully with %d vehicles", count)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(_main(sys.argv[1] if len(sys.argv) > 1 else None))
