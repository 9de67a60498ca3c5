from app.models.vehicle import Vehicle, VehicleStatus

__all__ = ["Vehicle", "VehicleStatus"]
