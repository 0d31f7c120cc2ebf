# fleetos/routers/maintenance_schedule.py
from typing import List, Optional
from fastapi import APIRouter, Depends, status, HTTPException, Response
from sqlalchemy.orm import Session

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.utils import apply_changes

router = APIRouter(
    prefix="/api/maintenance-schedules",
    tags=['Maintenance Schedules API']
)

# 1. CREATE
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.MaintenanceScheduleOut)
def create_schedule(
    schedule_data: schemas.MaintenanceScheduleCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    if not db.query(models.Vehicle).filter(models.Vehicle.id == schedule_data.vehicle_id).first():
        raise HTTPException(status_code=404, detail=f"Vehicle {schedule_data.vehicle_id} not found.")

    schedule = models.MaintenanceSchedule(**schedule_data.model_dump())
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule

# 2. READ ALL
@router.get("/", response_model=List[schemas.MaintenanceScheduleOut])
def get_schedules(
    is_active: Optional[bool] = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    query = db.query(models.MaintenanceSchedule)
    if is_active is not None:
        query = query.filter(models.MaintenanceSchedule.is_active == is_active)
    return query.order_by(models.MaintenanceSchedule.scheduled_date.asc(), models.MaintenanceSchedule.id.asc()).all()

# 3. READ BY VEHICLE
@router.get("/vehicle/{vehicle_id}", response_model=List[schemas.MaintenanceScheduleOut])
def get_schedules_for_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    if not db.query(models.Vehicle).filter(models.Vehicle.id == vehicle_id).first():
        raise HTTPException(status_code=404, detail="Vehicle not found.")
    return db.query(models.MaintenanceSchedule).filter(
        models.MaintenanceSchedule.vehicle_id == vehicle_id
    ).order_by(models.MaintenanceSchedule.id.asc()).all()

# 4. READ ONE
@router.get("/{id}", response_model=schemas.MaintenanceScheduleOut)
def get_schedule(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    schedule = db.query(models.MaintenanceSchedule).filter(models.MaintenanceSchedule.id == id).first()
    if not schedule:
        raise HTTPException(status_code=404, detail="Maintenance schedule not found.")
    return schedule

# 5. UPDATE
@router.patch("/{id}", response_model=schemas.MaintenanceScheduleOut)
def update_schedule(
    id: int,
    schedule_data: schemas.MaintenanceScheduleUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    schedule = db.query(models.MaintenanceSchedule).filter(models.MaintenanceSchedule.id == id).first()
    if not schedule:
        raise HTTPException(status_code=404, detail="Maintenance schedule not found.")

    apply_changes(schedule, schedule_data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(schedule)
    return schedule

# 6. DELETE
@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    schedule = db.query(models.MaintenanceSchedule).filter(models.MaintenanceSchedule.id == id).first()
    if not schedule:
        raise HTTPException(status_code=404, detail="Maintenance schedule not found.")

    # Work orders raised from this schedule stay, unlinked
    db.delete(schedule)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
