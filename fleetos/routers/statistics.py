# fleetos/routers/statistics.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.services import statistics

router = APIRouter(
    prefix="/api/statistics",
    tags=['Statistics']
)


@router.get("/fleet", response_model=schemas.FleetStatistics)
def get_fleet_statistics(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return statistics.fleet_statistics(db)


@router.get("/maintenance-compliance", response_model=schemas.MaintenanceCompliance)
def get_maintenance_compliance(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return statistics.maintenance_compliance(db)


# Unknown periods fail path validation and come back as 400
@router.get("/maintenance-cost/{period}", response_model=schemas.MaintenanceCost)
def get_maintenance_cost(
    period: schemas.CostPeriod,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return statistics.maintenance_cost(db, period)
