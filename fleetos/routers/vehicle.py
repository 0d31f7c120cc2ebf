# fleetos/routers/vehicle.py
from typing import Optional
from fastapi import APIRouter, Depends, status, HTTPException, Response, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_
import logging

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.utils import apply_changes

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/vehicles",
    tags=['Vehicles API']
)

# 1. CREATE
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.VehicleOut)
def create_vehicle(
    vehicle_data: schemas.VehicleCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    if db.query(models.Vehicle).filter(models.Vehicle.registration_number == vehicle_data.registration_number).first():
        raise HTTPException(status_code=409, detail="Registration number already exists.")

    new_vehicle = models.Vehicle(**vehicle_data.model_dump())
    db.add(new_vehicle)
    db.commit()
    db.refresh(new_vehicle)
    logger.info(f"Vehicle {new_vehicle.registration_number} (ID: {new_vehicle.id}) created by {current_user.username}")
    return new_vehicle

# 2. READ ALL
@router.get("/", response_model=schemas.PaginatedVehicleOut)
def get_all_vehicles(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user),
    status_filter: Optional[models.VehicleStatus] = Query(None, alias="status"),
    search: str = "",
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    query = db.query(models.Vehicle)
    if status_filter:
        query = query.filter(models.Vehicle.status == status_filter)
    if search:
        query = query.filter(or_(
            models.Vehicle.registration_number.ilike(f"%{search}%"),
            models.Vehicle.brand.ilike(f"%{search}%"),
            models.Vehicle.model.ilike(f"%{search}%")
        ))

    total = query.count()
    items = query.order_by(models.Vehicle.created_at.desc(), models.Vehicle.id.desc()).offset(offset).limit(limit).all()
    return {"total": total, "items": items}

# 3. READ ONE
@router.get("/{id}", response_model=schemas.VehicleOut)
def get_vehicle_by_id(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.id == id).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found.")
    return vehicle

# 4. UPDATE
@router.patch("/{id}", response_model=schemas.VehicleOut)
def update_vehicle(
    id: int,
    vehicle_data: schemas.VehicleUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.id == id).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    update_data = vehicle_data.model_dump(exclude_unset=True)

    new_registration = update_data.get("registration_number")
    if new_registration and new_registration != vehicle.registration_number:
        if db.query(models.Vehicle).filter(models.Vehicle.registration_number == new_registration).first():
            raise HTTPException(status_code=409, detail="Registration number already exists.")

    apply_changes(vehicle, update_data)
    db.commit()
    db.refresh(vehicle)
    return vehicle

# 5. DELETE
@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vehicle(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_admin)
):
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.id == id).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    if vehicle.work_orders:
        raise HTTPException(status_code=409, detail="Vehicle has work orders and cannot be deleted.")

    # Schedules and fuel records go with the vehicle
    db.delete(vehicle)
    db.commit()
    logger.info(f"Vehicle {id} deleted by {current_user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
