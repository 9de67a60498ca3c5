import enum

from sqlalchemy import Column, Enum, String

from app.database import Base


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "Available"
    IN_USE = "InUse"
    MAINTENANCE = "Maintenance"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)
    license_plate = Column("licensePlate", String, nullable=False, unique=True)
    status = Column(
        Enum(
            VehicleStatus,
            name="vehicle_status",
            native_enum=False,
            length=16,
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        default=VehicleStatus.AVAILABLE,
    )
    created_at = Column("createdAt", String, nullable=False)
