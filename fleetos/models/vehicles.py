# Vehicle, Fuel Records

import enum
from sqlalchemy import Column, Boolean, Date, Enum, Integer, String, Float, ForeignKey, DateTime, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleetos.database import Base

class VehicleStatus(str, enum.Enum):
    OPERATIONAL = 'operational'
    MAINTENANCE = 'maintenance'
    OUT_OF_SERVICE = 'out_of_service'

class FuelType(str, enum.Enum):
    DIESEL = 'diesel'
    PETROL = 'petrol'
    ELECTRIC = 'electric'
    HYBRID = 'hybrid'
    OTHER = 'other'

class Vehicle(Base):
    __tablename__ = "vehicles"
    id = Column(Integer, primary_key=True, index=True)

    registration_number = Column(String, unique=True, nullable=False, index=True)
    brand = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    mileage = Column(Integer, nullable=False, default=0)
    documents = Column(JSON, default=list)
    status = Column(
        Enum(VehicleStatus, name='vehicle_status_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=VehicleStatus.OPERATIONAL, index=True
    )
    fuel_type = Column(
        Enum(FuelType, name='fuel_type_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=FuelType.DIESEL
    )
    next_maintenance_date = Column(Date, nullable=True, index=True)
    next_maintenance_mileage = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    # Relationships
    work_orders = relationship("WorkOrder", back_populates="vehicle")
    maintenance_schedules = relationship("MaintenanceSchedule", back_populates="vehicle", cascade="all, delete-orphan")
    fuel_records = relationship("FuelRecord", back_populates="vehicle", cascade="all, delete-orphan")

class FuelRecord(Base):
    __tablename__ = "fuel_records"
    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    quantity = Column(Float, nullable=False)  # liters
    cost = Column(Float, nullable=False)
    mileage = Column(Integer, nullable=False)
    full_tank = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    vehicle = relationship("Vehicle", back_populates="fuel_records")
