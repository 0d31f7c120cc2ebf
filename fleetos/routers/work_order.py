# fleetos/routers/work_order.py
from typing import List, Optional
from fastapi import APIRouter, Depends, status, HTTPException, Response, Query
from sqlalchemy.orm import Session

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.services import inventory, work_orders

router = APIRouter(
    prefix="/api/work-orders",
    tags=['Work Orders API']
)

# 1. CREATE
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.WorkOrderOut)
def create_work_order(
    work_order_data: schemas.WorkOrderCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    return work_orders.create_work_order(db, work_order_data)

# 2. READ ALL (filtered, paginated)
@router.get("/", response_model=schemas.PaginatedWorkOrderOut)
def get_work_orders(
    status_filter: Optional[models.WorkOrderStatus] = Query(None, alias="status"),
    priority: Optional[models.Priority] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    items, total = work_orders.list_work_orders(db, status=status_filter, priority=priority, limit=limit, offset=offset)
    return {"total": total, "items": items}

# 3. READ BY VEHICLE
@router.get("/vehicle/{vehicle_id}", response_model=List[schemas.WorkOrderOut])
def get_work_orders_for_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    if not db.query(models.Vehicle).filter(models.Vehicle.id == vehicle_id).first():
        raise HTTPException(status_code=404, detail="Vehicle not found.")
    items, _ = work_orders.list_work_orders(db, vehicle_id=vehicle_id, limit=1000)
    return items

# 4. READ BY TECHNICIAN
@router.get("/technician/{technician_id}", response_model=List[schemas.WorkOrderOut])
def get_work_orders_for_technician(
    technician_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_technician)
):
    items, _ = work_orders.list_work_orders(db, technician_id=technician_id, limit=1000)
    return items

# 5. READ ONE (with parts)
@router.get("/{id}", response_model=schemas.WorkOrderDetailOut)
def get_work_order(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return work_orders.get_work_order(db, id, with_parts=True)

# 6. UPDATE (status changes go through the transition table)
@router.patch("/{id}", response_model=schemas.WorkOrderOut)
def update_work_order(
    id: int,
    work_order_data: schemas.WorkOrderUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_technician)
):
    return work_orders.update_work_order(db, id, work_order_data.model_dump(exclude_unset=True))

# 7. DELETE
@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_work_order(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    work_orders.delete_work_order(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- PARTS ON A WORK ORDER ---

@router.get("/{id}/parts", response_model=List[schemas.PartUsedOut])
def get_work_order_parts(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return inventory.list_usages_for_work_order(db, id)


@router.post("/{id}/parts", status_code=status.HTTP_201_CREATED, response_model=schemas.PartUsedOut)
def attach_part(
    id: int,
    part_data: schemas.PartUsedCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_technician)
):
    return inventory.attach_part(db, id, part_data.part_id, part_data.quantity, part_data.unit_price)
