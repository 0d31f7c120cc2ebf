# Maintenance Schedules, Work Orders
from typing import List, Optional
from datetime import datetime, date as DateType
from pydantic import BaseModel, Field
from fleetos.models import ScheduleFrequency, WorkOrderStatus, Priority
from .inventory import PartUsedOut
from .users import UserSimpleOut

# --- SCHEDULES ---
class MaintenanceScheduleBase(BaseModel):
    vehicle_id: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    scheduled_date: Optional[DateType] = None
    scheduled_mileage: Optional[int] = Field(None, ge=0)
    frequency: ScheduleFrequency
    frequency_value: int = Field(..., gt=0)
    is_active: bool = True

class MaintenanceScheduleCreate(MaintenanceScheduleBase): pass

class MaintenanceScheduleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    scheduled_date: Optional[DateType] = None
    scheduled_mileage: Optional[int] = Field(None, ge=0)
    frequency: Optional[ScheduleFrequency] = None
    frequency_value: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None

class MaintenanceScheduleOut(MaintenanceScheduleBase):
    id: int
    created_at: datetime
    class Config: from_attributes = True

# --- WORK ORDERS ---
class WorkOrderBase(BaseModel):
    vehicle_id: int
    technician_id: Optional[int] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    diagnosis: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0)
    cost: float = Field(0.0, ge=0)
    is_preventive: bool = False
    maintenance_schedule_id: Optional[int] = None

class WorkOrderCreate(WorkOrderBase):
    status: WorkOrderStatus = WorkOrderStatus.PENDING

class WorkOrderUpdate(BaseModel):
    technician_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    diagnosis: Optional[str] = None
    status: Optional[WorkOrderStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    is_preventive: Optional[bool] = None
    maintenance_schedule_id: Optional[int] = None

class WorkOrderOut(WorkOrderBase):
    id: int
    status: WorkOrderStatus
    created_at: datetime
    class Config: from_attributes = True

class WorkOrderDetailOut(WorkOrderOut):
    technician: Optional[UserSimpleOut] = None
    parts_used: List[PartUsedOut] = []
    parts_cost: float = 0.0

class PaginatedWorkOrderOut(BaseModel):
    total: int
    items: List[WorkOrderOut]
