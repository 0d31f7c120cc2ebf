# fleetos/services/work_orders.py
"""
Work order lifecycle.

    pending -> in_progress -> completed
       |            |
       +------------+-----> cancelled

pending may also go straight to completed. completed and cancelled are
terminal. Writing the current status again is accepted as a no-op.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload

from fleetos import models, schemas
from fleetos.exceptions import InvalidTransitionError, NotFoundError
from fleetos.services.inventory import release_work_order_parts
from fleetos.services.vehicle_status import hold_vehicle_for_maintenance, release_vehicle_if_idle
from fleetos.utils import apply_changes

logger = logging.getLogger(__name__)

Status = models.WorkOrderStatus

ALLOWED_TRANSITIONS = {
    Status.PENDING: {Status.IN_PROGRESS, Status.COMPLETED, Status.CANCELLED},
    Status.IN_PROGRESS: {Status.COMPLETED, Status.CANCELLED},
    Status.COMPLETED: set(),
    Status.CANCELLED: set(),
}


def check_transition(current: Status, requested: Status) -> None:
    if requested == current:
        return
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, requested.value)


def get_work_order(db: Session, work_order_id: int, with_parts: bool = False) -> models.WorkOrder:
    query = db.query(models.WorkOrder)
    if with_parts:
        query = query.options(
            joinedload(models.WorkOrder.parts_used),
            joinedload(models.WorkOrder.technician)
        )
    work_order = query.filter(models.WorkOrder.id == work_order_id).first()
    if not work_order:
        raise NotFoundError(f"Work order {work_order_id} not found.")
    return work_order


def _check_references(db: Session, technician_id: Optional[int], schedule_id: Optional[int]) -> None:
    if technician_id is not None:
        if not db.query(models.User.id).filter(models.User.id == technician_id).first():
            raise NotFoundError(f"Technician {technician_id} not found.")
    if schedule_id is not None:
        if not db.query(models.MaintenanceSchedule.id).filter(models.MaintenanceSchedule.id == schedule_id).first():
            raise NotFoundError(f"Maintenance schedule {schedule_id} not found.")


def create_work_order(db: Session, work_order_data: schemas.WorkOrderCreate) -> models.WorkOrder:
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.id == work_order_data.vehicle_id).first()
    if not vehicle:
        raise NotFoundError(f"Vehicle {work_order_data.vehicle_id} not found.")
    _check_references(db, work_order_data.technician_id, work_order_data.maintenance_schedule_id)

    try:
        work_order = models.WorkOrder(**work_order_data.model_dump())
        if work_order.status == Status.COMPLETED and work_order.end_date is None:
            work_order.end_date = datetime.utcnow()
        db.add(work_order)
        # Scheduled maintenance takes the vehicle off the road
        if work_order.maintenance_schedule_id is not None and work_order.status in models.ACTIVE_WORK_ORDER_STATUSES:
            hold_vehicle_for_maintenance(db, vehicle)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(work_order)
    logger.info(f"Created work order '{work_order.title}' (ID: {work_order.id}) for vehicle {vehicle.id}")
    return work_order


def update_work_order(db: Session, work_order_id: int, changes: dict) -> models.WorkOrder:
    work_order = get_work_order(db, work_order_id)
    previous = work_order.status

    requested = changes.get("status")
    if requested is not None:
        requested = Status(requested)
        check_transition(previous, requested)
        changes["status"] = requested
        if requested == Status.COMPLETED and previous != Status.COMPLETED and not changes.get("end_date"):
            changes["end_date"] = datetime.utcnow()

    _check_references(db, changes.get("technician_id"), changes.get("maintenance_schedule_id"))

    try:
        apply_changes(work_order, changes)
        if previous in models.ACTIVE_WORK_ORDER_STATUSES and work_order.status in models.CLOSED_WORK_ORDER_STATUSES:
            release_vehicle_if_idle(db, work_order.vehicle_id, exclude_id=work_order.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(work_order)
    if previous != work_order.status:
        logger.info(f"Work order {work_order.id}: {previous.value} -> {work_order.status.value}")
    return work_order


def delete_work_order(db: Session, work_order_id: int) -> None:
    """
    Delete the order and re-evaluate the vehicle. Parts of an open order go
    back to stock; parts of a closed order stay consumed.
    """
    work_order = get_work_order(db, work_order_id, with_parts=True)
    vehicle_id = work_order.vehicle_id

    try:
        released = 0
        if work_order.status in models.ACTIVE_WORK_ORDER_STATUSES:
            released = release_work_order_parts(db, work_order)
        # Remaining usage lines go with the order (delete-orphan cascade)
        db.delete(work_order)
        db.flush()
        release_vehicle_if_idle(db, vehicle_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Deleted work order {work_order_id} ({released} part line(s) returned to stock)")


def _paginate(query, limit: int, offset: int) -> Tuple[List[models.WorkOrder], int]:
    total = query.count()
    items = query.order_by(
        models.WorkOrder.created_at.desc(), models.WorkOrder.id.desc()
    ).offset(offset).limit(limit).all()
    return items, total


def list_work_orders(
    db: Session,
    status: Optional[Status] = None,
    priority: Optional[models.Priority] = None,
    vehicle_id: Optional[int] = None,
    technician_id: Optional[int] = None,
    limit: int = 100,
    offset: int = 0,
) -> Tuple[List[models.WorkOrder], int]:
    query = db.query(models.WorkOrder)
    if status:
        query = query.filter(models.WorkOrder.status == status)
    if priority:
        query = query.filter(models.WorkOrder.priority == priority)
    if vehicle_id is not None:
        query = query.filter(models.WorkOrder.vehicle_id == vehicle_id)
    if technician_id is not None:
        query = query.filter(models.WorkOrder.technician_id == technician_id)
    return _paginate(query, limit, offset)
