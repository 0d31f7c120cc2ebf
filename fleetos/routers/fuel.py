from typing import List, Optional
from datetime import date as date_type
from fastapi import APIRouter, Depends, status, Query, Response
from sqlalchemy.orm import Session

# --- Project Imports ---
from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.services import fuel

router = APIRouter(
    prefix="/api/fuel-records",
    tags=['Fuel Records API']
)

# =================================================================================
# CREATE (Authenticated)
# =================================================================================
@router.post("/", response_model=schemas.FuelRecordOut, status_code=status.HTTP_201_CREATED)
def create_fuel_record(
    record_data: schemas.FuelRecordCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    """
    Log a refuel. The vehicle's mileage follows the odometer reading if it is higher.
    """
    return fuel.create_fuel_record(db, record_data)

# =================================================================================
# READ ALL
# =================================================================================
@router.get("/", response_model=schemas.PaginatedFuelRecordOut)
def get_fuel_records(
    vehicle_id: Optional[int] = None,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    items, total = fuel.list_fuel_records(
        db, vehicle_id=vehicle_id, start_date=start_date, end_date=end_date, limit=limit, offset=offset
    )
    return {"total": total, "items": items}

# =================================================================================
# READ BY VEHICLE (with consumption)
# =================================================================================
@router.get("/vehicle/{vehicle_id}", response_model=List[schemas.FuelRecordWithConsumption])
def get_vehicle_fuel_records(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return fuel.vehicle_fuel_history(db, vehicle_id)

# =================================================================================
# READ ONE / UPDATE / DELETE
# =================================================================================
@router.get("/{id}", response_model=schemas.FuelRecordOut)
def get_fuel_record(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return fuel.get_fuel_record(db, id)


@router.patch("/{id}", response_model=schemas.FuelRecordOut)
def update_fuel_record(
    id: int,
    record_data: schemas.FuelRecordUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return fuel.update_fuel_record(db, id, record_data.model_dump(exclude_unset=True))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_fuel_record(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    fuel.delete_fuel_record(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
