import pytest
from sqlalchemy.exc import IntegrityError

from app.models.vehicle import Vehicle, VehicleStatus
from app.repositories.sql import SqlVehicleRepository
from app.schemas.vehicle import VehicleFilters
from app.services.vehicle_service import VehicleService
from app.utils.exceptions import CapacityExceededError, DuplicatePlateError

PLATES = ["1000001", "1000002", "1000003", "2000004"]


@pytest.fixture
def repository(db_session):
    return SqlVehicleRepository(db_session)


async def _insert_plates(repository, statuses=None):
    statuses = statuses or [VehicleStatus.AVAILABLE] * len(PLATES)
    for i, (plate, status) in enumerate(zip(PLATES, statuses)):
        await repository.insert(Vehicle(
            id=f"v-{i}", license_plate=plate, status=status,
            created_at=f"2025-01-0{i + 1}T00:00:00+00:00",
        ))


@pytest.mark.asyncio
async def test_search_by_plate_substring(repository):
    await _insert_plates(repository)

    found = await repository.search(VehicleFilters(search_plate="1000"))

    assert [v.license_plate for v in found] == ["1000003", "1000002", "1000001"]


@pytest.mark.asyncio
async def test_search_plate_is_literal(repository):
    await _insert_plates(repository)

    assert await repository.search(VehicleFilters(search_plate="%")) == []


@pytest.mark.asyncio
async def test_search_sort_created_at_ascending(repository):
    await _insert_plates(repository)

    found = await repository.search(VehicleFilters(sort_by="createdAt", sort_order="asc"))

    assert [v.id for v in found] == ["v-0", "v-1", "v-2", "v-3"]


@pytest.mark.asyncio
async def test_search_status_filter_and_sort(repository):
    await _insert_plates(repository, [
        VehicleStatus.IN_USE, VehicleStatus.AVAILABLE,
        VehicleStatus.MAINTENANCE, VehicleStatus.IN_USE,
    ])

    in_use = await repository.search(VehicleFilters(status=VehicleStatus.IN_USE))
    assert {v.id for v in in_use} == {"v-0", "v-3"}

    by_status = await repository.search(VehicleFilters(sort_by="status", sort_order="asc"))
    assert [v.status for v in by_status][0] is VehicleStatus.AVAILABLE
    assert [v.status for v in by_status][-1] is VehicleStatus.MAINTENANCE


@pytest.mark.asyncio
async def test_count(repository):
    await _insert_plates(repository, [
        VehicleStatus.MAINTENANCE, VehicleStatus.AVAILABLE,
        VehicleStatus.AVAILABLE, VehicleStatus.IN_USE,
    ])

    assert await repository.count() == 4
    assert await repository.count(VehicleStatus.MAINTENANCE) == 1
    assert await repository.count(VehicleStatus.AVAILABLE) == 2


@pytest.mark.asyncio
async def test_duplicate_insert_raises_conflict(repository):
    await _insert_plates(repository)

    with pytest.raises(DuplicatePlateError):
        await repository.insert(Vehicle(
            id="v-dup", license_plate="1000001",
            status=VehicleStatus.AVAILABLE, created_at="2025-02-01T00:00:00+00:00",
        ))

    assert await repository.count() == 4


@pytest.mark.asyncio
async def test_update_and_delete(repository):
    await _insert_plates(repository)
    vehicle = await repository.get_by_id("v-0")

    await repository.update(vehicle, {"license_plate": "3000001", "status": VehicleStatus.IN_USE})
    assert (await repository.get_by_plate("3000001")).status is VehicleStatus.IN_USE
    assert await repository.get_by_plate("1000001") is None

    await repository.delete(vehicle)
    assert await repository.get_by_id("v-0") is None


@pytest.mark.asyncio
async def test_service_capacity_over_sql(repository):
    for i in range(20):
        await repository.insert(Vehicle(
            id=f"f-{i}", license_plate=f"{7000000 + i}",
            status=VehicleStatus.AVAILABLE, created_at=f"2025-01-01T{i:02d}:00:00+00:00",
        ))
    service = VehicleService(repository, maintenance_capacity_ratio=0.05)

    await service.update_vehicle("f-0", status=VehicleStatus.MAINTENANCE)
    with pytest.raises(CapacityExceededError):
        await service.update_vehicle("f-1", status=VehicleStatus.MAINTENANCE)


@pytest.mark.asyncio
async def test_non_plate_integrity_error_is_not_a_conflict(repository):
    with pytest.raises(IntegrityError):
        await repository.insert(Vehicle(
            id="v-no-date", license_plate="4000001",
            status=VehicleStatus.AVAILABLE, created_at=None,
        ))

    assert await repository.count() == 0
