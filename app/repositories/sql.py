"""SQLAlchemy implementation of the vehicle repository."""

import logging

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vehicle import Vehicle, VehicleStatus
from app.repositories.base import VehicleRepository
from app.schemas.vehicle import VehicleFilters
from app.utils.exceptions import DuplicatePlateError

logger = logging.getLogger(__name__)


def _is_plate_conflict(exc: IntegrityError) -> bool:
    """True only for a violation of the unique index on licensePlate."""
    message = str(exc.orig).lower()
    return "licenseplate" in message and ("unique" in message or "duplicate" in message)


class SqlVehicleRepository(VehicleRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, vehicle_id: str) -> Vehicle | None:
        return await self._session.get(Vehicle, vehicle_id)

    async def get_by_plate(self, license_plate: str) -> Vehicle | None:
        result = await self._session.execute(
            select(Vehicle).where(Vehicle.license_plate == license_plate)
        )
        return result.scalars().first()

    async def count(self, status: VehicleStatus | None = None) -> int:
        stmt = select(func.count()).select_from(Vehicle)
        if status is not None:
            stmt = stmt.where(Vehicle.status == status)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def search(self, filters: VehicleFilters) -> list[Vehicle]:
        stmt = select(Vehicle)
        if filters.status is not None:
            stmt = stmt.where(Vehicle.status == filters.status)
        if filters.search_plate:
            stmt = stmt.where(Vehicle.license_plate.contains(filters.search_plate, autoescape=True))

        column = Vehicle.status if filters.sort_by == "status" else Vehicle.created_at
        direction = asc if filters.sort_order == "asc" else desc
        stmt = stmt.order_by(direction(column))

        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def insert(self, vehicle: Vehicle) -> Vehicle:
        self._session.add(vehicle)
        await self._commit(vehicle.license_plate)
        await self._session.refresh(vehicle)
        return vehicle

    async def update(self, vehicle: Vehicle, changes: dict) -> Vehicle:
        for field, value in changes.items():
            setattr(vehicle, field, value)
        await self._commit(vehicle.license_plate)
        await self._session.refresh(vehicle)
        return vehicle

    async def delete(self, vehicle: Vehicle) -> None:
        await self._session.delete(vehicle)
        await self._session.commit()

    async def _commit(self, license_plate: str) -> None:
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            if not _is_plate_conflict(exc):
                raise
            logger.warning("Unique constraint rejected license plate %s", license_plate)
            raise DuplicatePlateError(license_plate)
