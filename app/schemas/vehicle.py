from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.vehicle import VehicleStatus


class VehicleCreate(BaseModel):
    license_plate: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VehicleUpdate(BaseModel):
    license_plate: str | None = None
    # Parsed by the service so unknown values get its own error message
    status: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VehicleFilters(BaseModel):
    status: VehicleStatus | None = None
    search_plate: str | None = None
    sort_by: Literal["createdAt", "status"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VehicleResponse(BaseModel):
    id: str
    license_plate: str
    status: VehicleStatus
    created_at: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
