# Exposes all models to the app
from .users import User, UserToken, UserRole
from .vehicles import Vehicle, FuelRecord, VehicleStatus, FuelType
from .maintenance import (
    MaintenanceSchedule, WorkOrder, ScheduleFrequency, WorkOrderStatus, Priority,
    ACTIVE_WORK_ORDER_STATUSES, CLOSED_WORK_ORDER_STATUSES
)
from .inventory import Part, PartUsed
from .alerts import Alert, AlertType
