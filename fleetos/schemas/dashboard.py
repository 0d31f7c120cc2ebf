# Statistics
from enum import Enum
from pydantic import BaseModel

class CostPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

class FleetStatistics(BaseModel):
    operational: int
    maintenance: int
    out_of_service: int

class MaintenanceCompliance(BaseModel):
    compliant: int
    overdue: int
    total: int

class MaintenanceCost(BaseModel):
    period: CostPeriod
    cost: float
