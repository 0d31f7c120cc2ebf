# fleetos/services/vehicle_status.py
"""
Vehicle status projection.

A vehicle is "under maintenance" while it has at least one work order in
pending or in_progress. Nothing is cached: every check queries work_orders.
Callers own the transaction; these helpers never commit.
"""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from fleetos import models

logger = logging.getLogger(__name__)


def has_active_work_orders(db: Session, vehicle_id: int, exclude_id: Optional[int] = None) -> bool:
    # Pending attribute changes must be visible to the query (sessions run with autoflush off)
    db.flush()
    query = db.query(models.WorkOrder.id).filter(
        models.WorkOrder.vehicle_id == vehicle_id,
        models.WorkOrder.status.in_(models.ACTIVE_WORK_ORDER_STATUSES)
    )
    if exclude_id is not None:
        query = query.filter(models.WorkOrder.id != exclude_id)
    return query.first() is not None


def hold_vehicle_for_maintenance(db: Session, vehicle: models.Vehicle) -> bool:
    """operational -> maintenance. Out-of-service vehicles are left alone."""
    if vehicle.status != models.VehicleStatus.OPERATIONAL:
        return False
    vehicle.status = models.VehicleStatus.MAINTENANCE
    logger.info(f"Vehicle {vehicle.registration_number} (ID: {vehicle.id}) moved to maintenance")
    return True


def release_vehicle_if_idle(db: Session, vehicle_id: int, exclude_id: Optional[int] = None) -> bool:
    """maintenance -> operational once no other active work order remains."""
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.id == vehicle_id).first()
    if not vehicle or vehicle.status != models.VehicleStatus.MAINTENANCE:
        return False

    if has_active_work_orders(db, vehicle_id, exclude_id=exclude_id):
        return False

    vehicle.status = models.VehicleStatus.OPERATIONAL
    logger.info(f"Vehicle {vehicle.registration_number} (ID: {vehicle.id}) back to operational")
    return True
