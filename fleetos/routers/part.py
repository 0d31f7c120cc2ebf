# fleetos/routers/part.py
from typing import List
from fastapi import APIRouter, Depends, status, HTTPException, Response, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_
import logging

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.services import inventory
from fleetos.utils import apply_changes

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/parts",
    tags=['Parts Inventory API']
)

# 1. CREATE
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.PartOut)
def create_part(
    part_data: schemas.PartCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    if db.query(models.Part).filter(models.Part.reference == part_data.reference).first():
        raise HTTPException(status_code=409, detail="Part reference already exists.")

    part = models.Part(**part_data.model_dump())
    db.add(part)
    db.commit()
    db.refresh(part)
    return part

# 2. READ ALL
@router.get("/", response_model=schemas.PaginatedPartOut)
def get_parts(
    search: str = "",
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    query = db.query(models.Part)
    if search:
        query = query.filter(or_(
            models.Part.name.ilike(f"%{search}%"),
            models.Part.reference.ilike(f"%{search}%")
        ))
    total = query.count()
    items = query.order_by(models.Part.name.asc(), models.Part.id.asc()).offset(offset).limit(limit).all()
    return {"total": total, "items": items}

# 3. LOW STOCK (Must be before /{id})
@router.get("/low-on-stock", response_model=List[schemas.PartOut])
def get_low_stock_parts(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return inventory.list_low_stock(db)

# 4. READ ONE
@router.get("/{id}", response_model=schemas.PartOut)
def get_part(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return inventory.get_part(db, id)

# 5. UPDATE
@router.patch("/{id}", response_model=schemas.PartOut)
def update_part(
    id: int,
    part_data: schemas.PartUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    part = inventory.get_part(db, id)
    update_data = part_data.model_dump(exclude_unset=True)

    new_reference = update_data.get("reference")
    if new_reference and new_reference != part.reference:
        if db.query(models.Part).filter(models.Part.reference == new_reference).first():
            raise HTTPException(status_code=409, detail="Part reference already exists.")

    apply_changes(part, update_data)
    db.commit()
    db.refresh(part)
    return part

# 6. STOCK ADJUSTMENT
@router.patch("/{id}/stock", response_model=schemas.PartOut)
def adjust_part_stock(
    id: int,
    adjustment: schemas.StockAdjustment,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    return inventory.adjust_stock(db, id, adjustment.quantity_change, adjustment.reason)

# 7. DELETE
@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_part(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_admin)
):
    part = inventory.get_part(db, id)
    if part.usages:
        raise HTTPException(status_code=409, detail="Part is recorded on work orders and cannot be deleted.")

    db.delete(part)
    db.commit()
    logger.info(f"Part {part.reference} deleted by {current_user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
