# fleetos/routers/alert.py
from typing import List
from fastapi import APIRouter, Depends, status, HTTPException, Response
from sqlalchemy.orm import Session

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.services import alerts

router = APIRouter(
    prefix="/api/alerts",
    tags=['Alerts API']
)

MANAGER_ROLES = (models.UserRole.ADMIN, models.UserRole.WORKSHOP_MANAGER)


@router.get("/", response_model=List[schemas.AlertOut])
def get_my_alerts(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return alerts.list_alerts_for_user(db, current_user.id)


@router.get("/unread", response_model=List[schemas.AlertOut])
def get_my_unread_alerts(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    return alerts.list_alerts_for_user(db, current_user.id, unread_only=True)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.AlertOut)
def create_alert(
    alert_data: schemas.AlertCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.require_manager)
):
    return alerts.create_alert(db, alert_data)


def _check_alert_access(alert: models.Alert, user: models.User) -> None:
    # Personal alerts belong to their recipient; managers may act on any alert
    if alert.user_id is not None and alert.user_id != user.id and user.role not in MANAGER_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to modify this alert.")


@router.patch("/{id}/read", response_model=schemas.AlertOut)
def mark_alert_read(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    _check_alert_access(alerts.get_alert(db, id), current_user)
    return alerts.mark_alert_as_read(db, id)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_alert(
    id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(oauth2.get_current_user)
):
    alert = alerts.get_alert(db, id)
    _check_alert_access(alert, current_user)
    db.delete(alert)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
