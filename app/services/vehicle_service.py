"""Fleet rules: plate format and uniqueness, status lifecycle, maintenance capacity."""
import asyncio
import logging
import re
import uuid
import weakref

from app.config import settings
from app.models.vehicle import Vehicle, VehicleStatus
from app.repositories.base import VehicleRepository
from app.schemas.vehicle import VehicleFilters
from app.utils.exceptions import (
    CapacityExceededError,
    DuplicatePlateError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    VehicleNotDeletableError,
)
from app.utils.timestamps import utc_now

logger = logging.getLogger(__name__)

LICENSE_PLATE_PATTERN = re.compile(r"[0-9]{7,8}")
INVALID_PLATE_MESSAGE = "Invalid license plate: Must be 7 or 8 digits only."

ALLOWED_TRANSITIONS: dict[VehicleStatus, frozenset[VehicleStatus]] = {
    VehicleStatus.AVAILABLE: frozenset({VehicleStatus.IN_USE, VehicleStatus.MAINTENANCE}),
    VehicleStatus.IN_USE: frozenset({VehicleStatus.AVAILABLE, VehicleStatus.MAINTENANCE}),
    VehicleStatus.MAINTENANCE: frozenset({VehicleStatus.AVAILABLE}),
}

DELETABLE_STATUSES = frozenset({VehicleStatus.AVAILABLE})

# One lock per event loop; serializes read-check-write sequences within this process.
_write_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def _write_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _write_locks.get(loop)
    if lock is None:
        lock = _write_locks[loop] = asyncio.Lock()
    return lock


def is_valid_license_plate(license_plate: str) -> bool:
    return LICENSE_PLATE_PATTERN.fullmatch(license_plate) is not None


def can_transition(current: VehicleStatus, new: VehicleStatus) -> bool:
    return new == current or new in ALLOWED_TRANSITIONS[current]


def within_maintenance_capacity(maintenance_count: int, total: int, ratio: float) -> bool:
    """True if one more vehicle may enter Maintenance. An empty fleet always passes."""
    if total == 0:
        return True
    return (maintenance_count + 1) / total <= ratio


def _parse_status(status: VehicleStatus | str) -> VehicleStatus:
    try:
        return VehicleStatus(status)
    except ValueError:
        raise InvalidInputError("Invalid status provided")


class VehicleService:
    def __init__(self, repository: VehicleRepository, maintenance_capacity_ratio: float | None = None):
        self._repository = repository
        if maintenance_capacity_ratio is None:
            maintenance_capacity_ratio = settings.maintenance_capacity_ratio
        self._capacity_ratio = maintenance_capacity_ratio

    async def list_vehicles(self, filters: VehicleFilters | None = None) -> list[Vehicle]:
        return await self._repository.search(filters or VehicleFilters())

    async def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = await self._repository.get_by_id(vehicle_id)
        if vehicle is None:
            raise NotFoundError()
        return vehicle

    async def create_vehicle(self, license_plate: str) -> Vehicle:
        async with _write_lock():
            await self._check_plate(license_plate)
            vehicle = Vehicle(
                id=str(uuid.uuid4()),
                license_plate=license_plate,
                status=VehicleStatus.AVAILABLE,
                created_at=utc_now(),
            )
            vehicle = await self._repository.insert(vehicle)
        logger.info("Created vehicle %s with plate %s", vehicle.id, vehicle.license_plate)
        return vehicle

    async def update_vehicle(
        self,
        vehicle_id: str,
        license_plate: str | None = None,
        status: VehicleStatus | str | None = None,
    ) -> Vehicle:
        """Change the plate and/or status of a vehicle.

        Empty values count as not supplied. Fields equal to the current
        value are left untouched and skip their checks.
        """
        new_status = _parse_status(status) if status else None

        async with _write_lock():
            vehicle = await self.get_vehicle(vehicle_id)
            changes: dict = {}

            if license_plate and license_plate != vehicle.license_plate:
                await self._check_plate(license_plate)
                changes["license_plate"] = license_plate

            if new_status is not None and new_status != vehicle.status:
                await self._check_transition(vehicle, new_status)
                changes["status"] = new_status

            if changes:
                vehicle = await self._repository.update(vehicle, changes)
                logger.info("Updated vehicle %s: %s", vehicle.id, sorted(changes))
        return vehicle

    async def delete_vehicle(self, vehicle_id: str) -> None:
        async with _write_lock():
            vehicle = await self.get_vehicle(vehicle_id)
            if vehicle.status not in DELETABLE_STATUSES:
                logger.warning("Refused to delete vehicle %s in status %s", vehicle.id, vehicle.status.value)
                raise VehicleNotDeletableError()
            await self._repository.delete(vehicle)
        logger.info("Deleted vehicle %s", vehicle_id)

    async def _check_plate(self, license_plate: str) -> None:
        if not is_valid_license_plate(license_plate):
            raise InvalidInputError(INVALID_PLATE_MESSAGE)
        if await self._repository.get_by_plate(license_plate) is not None:
            raise DuplicatePlateError(license_plate)

    async def _check_transition(self, vehicle: Vehicle, new_status: VehicleStatus) -> None:
        if not can_transition(vehicle.status, new_status):
            logger.warning(
                "Rejected transition %s -> %s for vehicle %s",
                vehicle.status.value, new_status.value, vehicle.id,
            )
            raise InvalidTransitionError(
                f"Vehicle in {vehicle.status.value} can only be moved to "
                + " or ".join(sorted(s.value for s in ALLOWED_TRANSITIONS[vehicle.status]))
                + " status."
            )

        if new_status is VehicleStatus.MAINTENANCE:
            total = await self._repository.count()
            in_maintenance = await self._repository.count(VehicleStatus.MAINTENANCE)
            if not within_maintenance_capacity(in_maintenance, total, self._capacity_ratio):
                logger.warning(
                    "Maintenance capacity reached: %d of %d vehicles already in Maintenance",
                    in_maintenance, total,
                )
                raise CapacityExceededError(
                    f"Cannot move to Maintenance. Fleet maintenance capacity "
                    f"({self._capacity_ratio:.0%}) exceeded."
                )
