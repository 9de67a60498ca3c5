from fastapi import APIRouter, Depends, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.dependencies import get_vehicle_service
from app.schemas.vehicle import VehicleCreate, VehicleFilters, VehicleResponse, VehicleUpdate
from app.services.vehicle_service import VehicleService
from app.utils.exceptions import InvalidInputError

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _serialize(vehicle) -> dict:
    return VehicleResponse.model_validate(vehicle).model_dump(mode="json", by_alias=True)


def _list_filters(
    status: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
    search_plate: str | None = Query(default=None, alias="searchPlate"),
) -> VehicleFilters:
    # Empty query values mean "not supplied"
    raw = {"status": status, "sortBy": sort_by, "sortOrder": sort_order, "searchPlate": search_plate}
    supplied = {key: value.strip() for key, value in raw.items() if value and value.strip()}
    try:
        return VehicleFilters.model_validate(supplied)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


@router.get("")
async def list_vehicles(
    filters: VehicleFilters = Depends(_list_filters),
    service: VehicleService = Depends(get_vehicle_service),
):
    vehicles = await service.list_vehicles(filters)
    return [_serialize(v) for v in vehicles]


@router.get("/{vehicle_id}")
async def get_vehicle(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    vehicle = await service.get_vehicle(vehicle_id)
    return _serialize(vehicle)


@router.post("", status_code=201)
async def create_vehicle(payload: VehicleCreate, service: VehicleService = Depends(get_vehicle_service)):
    if not payload.license_plate:
        raise InvalidInputError("License plate is required and must be a string")
    vehicle = await service.create_vehicle(payload.license_plate)
    return _serialize(vehicle)


@router.put("/{vehicle_id}")
async def update_vehicle(
    vehicle_id: str,
    payload: VehicleUpdate,
    service: VehicleService = Depends(get_vehicle_service),
):
    if not payload.license_plate and not payload.status:
        raise InvalidInputError("At least one field is required for update")
    vehicle = await service.update_vehicle(
        vehicle_id,
        license_plate=payload.license_plate,
        status=payload.status,
    )
    return _serialize(vehicle)


@router.delete("/{vehicle_id}", status_code=204)
async def delete_vehicle(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    await service.delete_vehicle(vehicle_id)
    return Response(status_code=204)
