"""In-memory vehicle repository for testing and development."""

from app.models.vehicle import Vehicle, VehicleStatus
from app.repositories.base import VehicleRepository
from app.schemas.vehicle import VehicleFilters
from app.utils.exceptions import DuplicatePlateError


class InMemoryVehicleRepository(VehicleRepository):
    def __init__(self, vehicles: list[Vehicle] | None = None):
        self._vehicles: dict[str, Vehicle] = {}
        for vehicle in vehicles or []:
            self._vehicles[vehicle.id] = vehicle

    async def get_by_id(self, vehicle_id: str) -> Vehicle | None:
        return self._vehicles.get(vehicle_id)

    async def get_by_plate(self, license_plate: str) -> Vehicle | None:
        for vehicle in self._vehicles.values():
            if vehicle.license_plate == license_plate:
                return vehicle
        return None

    async def count(self, status: VehicleStatus | None = None) -> int:
        if status is None:
            return len(self._vehicles)
        return sum(1 for v in self._vehicles.values() if v.status == status)

    async def search(self, filters: VehicleFilters) -> list[Vehicle]:
        vehicles = list(self._vehicles.values())
        if filters.status is not None:
            vehicles = [v for v in vehicles if v.status == filters.status]
        if filters.search_plate:
            vehicles = [v for v in vehicles if filters.search_plate in v.license_plate]

        return sorted(
            vehicles,
            key=lambda v: v.status.value if filters.sort_by == "status" else v.created_at,
            reverse=filters.sort_order == "desc",
        )

    async def insert(self, vehicle: Vehicle) -> Vehicle:
        self._check_plate_free(vehicle.license_plate, vehicle.id)
        self._vehicles[vehicle.id] = vehicle
        return vehicle

    async def update(self, vehicle: Vehicle, changes: dict) -> Vehicle:
        if "license_plate" in changes:
            self._check_plate_free(changes["license_plate"], vehicle.id)
        for field, value in changes.items():
            setattr(vehicle, field, value)
        return vehicle

    async def delete(self, vehicle: Vehicle) -> None:
        self._vehicles.pop(vehicle.id, None)

    def _check_plate_free(self, license_plate: str, vehicle_id: str) -> None:
        existing = next(
            (v for v in self._vehicles.values() if v.license_plate == license_plate),
            None,
        )
        if existing is not None and existing.id != vehicle_id:
            raise DuplicatePlateError(license_plate)
