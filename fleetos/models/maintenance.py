# Maintenance Schedules, Work Orders

import enum
from sqlalchemy import Boolean, Column, Date, DateTime, Enum, Float, Integer, String, Text, ForeignKey, func
from sqlalchemy.orm import relationship
from fleetos.database import Base

class ScheduleFrequency(str, enum.Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'
    YEARLY = 'yearly'
    MILEAGE = 'mileage'

class WorkOrderStatus(str, enum.Enum):
    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

class Priority(str, enum.Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'

ACTIVE_WORK_ORDER_STATUSES = (WorkOrderStatus.PENDING, WorkOrderStatus.IN_PROGRESS)
CLOSED_WORK_ORDER_STATUSES = (WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED)

class MaintenanceSchedule(Base):
    __tablename__ = "maintenance_schedules"
    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    scheduled_date = Column(Date, nullable=True, index=True)
    scheduled_mileage = Column(Integer, nullable=True)
    frequency = Column(
        Enum(ScheduleFrequency, name='schedule_frequency_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    frequency_value = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    vehicle = relationship("Vehicle", back_populates="maintenance_schedules")
    work_orders = relationship("WorkOrder", back_populates="maintenance_schedule")

class WorkOrder(Base):
    __tablename__ = "work_orders"
    id = Column(Integer, primary_key=True, index=True)

    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    technician_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    maintenance_schedule_id = Column(Integer, ForeignKey("maintenance_schedules.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    diagnosis = Column(Text, nullable=True)
    status = Column(
        Enum(WorkOrderStatus, name='work_order_status_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=WorkOrderStatus.PENDING, index=True
    )
    priority = Column(
        Enum(Priority, name='priority_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=Priority.MEDIUM, index=True
    )
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True, index=True)
    duration = Column(Integer, nullable=True)  # minutes
    cost = Column(Float, nullable=False, default=0.0)
    is_preventive = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    vehicle = relationship("Vehicle", back_populates="work_orders")
    technician = relationship("User", back_populates="work_orders")
    maintenance_schedule = relationship("MaintenanceSchedule", back_populates="work_orders")
    parts_used = relationship("PartUsed", back_populates="work_order", cascade="all, delete-orphan")

    @property
    def parts_cost(self) -> float:
        return round(sum(pu.quantity * pu.unit_price for pu in self.parts_used), 2)
