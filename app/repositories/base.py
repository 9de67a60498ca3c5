"""Port interface for vehicle storage."""

from abc import ABC, abstractmethod

from app.models.vehicle import Vehicle, VehicleStatus
from app.schemas.vehicle import VehicleFilters


class VehicleRepository(ABC):
    """Keyed access to the vehicles table.

    Implementations enforce plate uniqueness on write and raise
    ``DuplicatePlateError`` when it is violated.
    """

    @abstractmethod
    async def get_by_id(self, vehicle_id: str) -> Vehicle | None:
        raise NotImplementedError

    @abstractmethod
    async def get_by_plate(self, license_plate: str) -> Vehicle | None:
        raise NotImplementedError

    @abstractmethod
    async def count(self, status: VehicleStatus | None = None) -> int:
        """Count all vehicles, or only those in ``status``."""
        raise NotImplementedError

    @abstractmethod
    async def search(self, filters: VehicleFilters) -> list[Vehicle]:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, vehicle: Vehicle) -> Vehicle:
        raise NotImplementedError

    @abstractmethod
    async def update(self, vehicle: Vehicle, changes: dict) -> Vehicle:
        """Apply ``changes`` (attribute name -> value) to ``vehicle`` and persist."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, vehicle: Vehicle) -> None:
        raise NotImplementedError
