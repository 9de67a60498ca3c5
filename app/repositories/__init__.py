from app.repositories.base import VehicleRepository
from app.repositories.memory import InMemoryVehicleRepository
from app.repositories.sql import SqlVehicleRepository

__all__ = ["VehicleRepository", "InMemoryVehicleRepository", "SqlVehicleRepository"]
