# fleetos/routers/users.py

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, status, HTTPException, Response
from sqlalchemy.orm import Session

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.utils import apply_changes

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=['Users']
)


# 1. READ ALL (role filter doubles as the technicians list)
@router.get("/", response_model=List[schemas.UserOut])
def get_users(
    role: Optional[models.UserRole] = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    query = db.query(models.User)
    if role:
        query = query.filter(models.User.role == role)
    return query.order_by(models.User.name.asc()).all()


# 2. READ ONE (managers, or the user themself)
@router.get("/{id}", response_model=schemas.UserOut)
def get_user(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    if current_user.id != id and current_user.role not in (models.UserRole.ADMIN, models.UserRole.WORKSHOP_MANAGER):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this user.")

    user = db.query(models.User).filter(models.User.id == id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


# 3. UPDATE (role / activation)
@router.patch("/{id}", response_model=schemas.UserOut)
def update_user(
    id: int,
    user_data: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_admin)
):
    user = db.query(models.User).filter(models.User.id == id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")

    update_data = user_data.model_dump(exclude_unset=True)

    if update_data.get("email") and update_data["email"] != user.email:
        if db.query(models.User).filter(models.User.email == update_data["email"]).first():
            raise HTTPException(status_code=400, detail="Email already in use.")

    apply_changes(user, update_data)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.username} updated by {current_user.username}: {sorted(update_data)}")
    return user


# 4. DELETE
@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_admin)
):
    if id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account.")

    user = db.query(models.User).filter(models.User.id == id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")

    # Sessions and personal alerts cascade; work orders keep running unassigned
    db.delete(user)
    db.commit()
    logger.info(f"User {id} deleted by {current_user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
