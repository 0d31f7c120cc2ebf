# fleetos/services/alerts.py

import logging
from typing import List
from sqlalchemy import or_
from sqlalchemy.orm import Session

from fleetos import models, schemas
from fleetos.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def get_alert(db: Session, alert_id: int) -> models.Alert:
    alert = db.query(models.Alert).filter(models.Alert.id == alert_id).first()
    if not alert:
        raise NotFoundError("Alert not found")
    return alert


def list_alerts_for_user(db: Session, user_id: int, unread_only: bool = False) -> List[models.Alert]:
    """Alerts addressed to the user plus broadcasts, newest first."""
    query = db.query(models.Alert).filter(
        or_(models.Alert.user_id == user_id, models.Alert.user_id.is_(None))
    )
    if unread_only:
        query = query.filter(models.Alert.is_read.is_(False))
    return query.order_by(models.Alert.created_at.desc(), models.Alert.id.desc()).all()


def create_alert(db: Session, alert_data: schemas.AlertCreate) -> models.Alert:
    if alert_data.user_id is not None:
        if not db.query(models.User).filter(models.User.id == alert_data.user_id).first():
            raise NotFoundError(f"User {alert_data.user_id} not found.")

    alert = models.Alert(**alert_data.model_dump())
    db.add(alert)
    db.commit()
    db.refresh(alert)
    logger.info(f"Created {alert.type.value} alert '{alert.title}' (ID: {alert.id})")
    return alert


def mark_alert_as_read(db: Session, alert_id: int) -> models.Alert:
    alert = get_alert(db, alert_id)
    alert.is_read = True
    db.commit()
    db.refresh(alert)
    return alert


def raise_low_stock_alert(db: Session, part: models.Part) -> models.Alert:
    """Queue a broadcast inventory alert in the caller's transaction."""
    priority = models.Priority.HIGH if part.quantity <= 0 else models.Priority.MEDIUM
    alert = models.Alert(
        user_id=None,
        title=f"Low stock: {part.name}",
        message=f"Part {part.reference} is down to {part.quantity} unit(s) (minimum {part.min_quantity}).",
        type=models.AlertType.INVENTORY,
        priority=priority,
        link=f"/inventory/{part.id}",
    )
    db.add(alert)
    logger.warning(f"[ALERT][INVENTORY] {alert.message}")
    return alert
