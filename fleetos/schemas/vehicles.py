# Vehicle, Fuel
from typing import Optional, List, Any
from datetime import datetime, date as DateType
from pydantic import BaseModel, Field
from fleetos.models import VehicleStatus, FuelType

# =================================================================
# VEHICLES
# =================================================================
class VehicleBase(BaseModel):
    registration_number: str = Field(..., min_length=1, max_length=50)
    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: int = Field(..., ge=1900, le=2100)
    mileage: int = Field(0, ge=0)
    fuel_type: FuelType = FuelType.DIESEL
    status: VehicleStatus = VehicleStatus.OPERATIONAL
    next_maintenance_date: Optional[DateType] = None
    next_maintenance_mileage: Optional[int] = Field(None, ge=0)
    documents: List[Any] = []

class VehicleCreate(VehicleBase):
    pass

class VehicleUpdate(BaseModel):
    registration_number: Optional[str] = Field(None, min_length=1, max_length=50)
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(None, ge=1900, le=2100)
    mileage: Optional[int] = Field(None, ge=0)
    fuel_type: Optional[FuelType] = None
    status: Optional[VehicleStatus] = None
    next_maintenance_date: Optional[DateType] = None
    next_maintenance_mileage: Optional[int] = Field(None, ge=0)
    documents: Optional[List[Any]] = None

class VehicleOut(VehicleBase):
    id: int
    created_at: datetime
    class Config:
        from_attributes = True

class PaginatedVehicleOut(BaseModel):
    total: int
    items: List[VehicleOut]

# =================================================================
# FUEL
# =================================================================
class FuelRecordBase(BaseModel):
    vehicle_id: int
    date: DateType
    quantity: float = Field(..., gt=0)
    cost: float = Field(..., ge=0)
    mileage: int = Field(..., ge=0)
    full_tank: bool = True
    notes: Optional[str] = None

class FuelRecordCreate(FuelRecordBase):
    pass

class FuelRecordUpdate(BaseModel):
    date: Optional[DateType] = None
    quantity: Optional[float] = Field(None, gt=0)
    cost: Optional[float] = Field(None, ge=0)
    mileage: Optional[int] = Field(None, ge=0)
    full_tank: Optional[bool] = None
    notes: Optional[str] = None

class FuelRecordOut(FuelRecordBase):
    id: int
    created_at: datetime
    class Config: from_attributes = True

class FuelRecordWithConsumption(FuelRecordOut):
    # L/100km against the previous full-tank record, None when not computable
    consumption: Optional[float] = None

class PaginatedFuelRecordOut(BaseModel):
    total: int
    items: List[FuelRecordOut]
