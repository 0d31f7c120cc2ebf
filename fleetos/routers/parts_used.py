# fleetos/routers/parts_used.py
from fastapi import APIRouter, Depends, status, Response
from sqlalchemy.orm import Session

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.services import inventory

router = APIRouter(
    prefix="/api/parts-used",
    tags=['Parts Used API']
)


@router.patch("/{id}", response_model=schemas.PartUsedOut)
def update_part_usage(
    id: int,
    usage_data: schemas.PartUsedUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_technician)
):
    return inventory.update_part_usage(db, id, usage_data.quantity)


# Deleting an unknown usage is a no-op and still answers 204
@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def detach_part(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_technician)
):
    inventory.detach_part(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
