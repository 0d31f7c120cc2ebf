# fleetos/services/statistics.py

from datetime import date, datetime, timedelta
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from fleetos import models
from fleetos.schemas import CostPeriod
from fleetos.utils import subtract_months

PERIOD_MONTHS = {
    CostPeriod.MONTH: 1,
    CostPeriod.QUARTER: 3,
    CostPeriod.YEAR: 12,
}


def period_start(period: CostPeriod, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.utcnow()
    if period == CostPeriod.WEEK:
        return now - timedelta(days=7)
    return subtract_months(now, PERIOD_MONTHS[period])


def fleet_statistics(db: Session) -> dict:
    counts = dict(
        db.query(models.Vehicle.status, func.count(models.Vehicle.id))
        .group_by(models.Vehicle.status)
        .all()
    )
    return {
        "operational": counts.get(models.VehicleStatus.OPERATIONAL, 0),
        "maintenance": counts.get(models.VehicleStatus.MAINTENANCE, 0),
        "out_of_service": counts.get(models.VehicleStatus.OUT_OF_SERVICE, 0),
    }


def maintenance_compliance(db: Session, today: Optional[date] = None) -> dict:
    """A vehicle is overdue once its next maintenance date is in the past."""
    today = today or date.today()
    total = db.query(func.count(models.Vehicle.id)).scalar() or 0
    overdue = db.query(func.count(models.Vehicle.id)).filter(
        models.Vehicle.next_maintenance_date.isnot(None),
        models.Vehicle.next_maintenance_date < today
    ).scalar() or 0
    return {"compliant": total - overdue, "overdue": overdue, "total": total}


def maintenance_cost(db: Session, period: CostPeriod, now: Optional[datetime] = None) -> dict:
    """Sum of completed work order costs whose end date falls within the period."""
    since = period_start(period, now)
    total = db.query(func.coalesce(func.sum(models.WorkOrder.cost), 0.0)).filter(
        models.WorkOrder.status == models.WorkOrderStatus.COMPLETED,
        models.WorkOrder.end_date.isnot(None),
        models.WorkOrder.end_date >= since
    ).scalar()
    return {"period": period, "cost": round(float(total or 0.0), 2)}
