# fleetos/services/inventory.py
"""
Parts ledger.

Every movement of stock goes through `_move_stock`, which issues a single
`UPDATE parts SET quantity = quantity + :delta` so concurrent writers never
lose each other's changes. Each public operation commits exactly once and
rolls back on any failure, so a PartUsed row and its stock movement are
always persisted together.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from fleetos import models
from fleetos.config import settings
from fleetos.exceptions import ConflictError, NotFoundError
from fleetos.services.alerts import raise_low_stock_alert

logger = logging.getLogger(__name__)


def get_part(db: Session, part_id: int) -> models.Part:
    part = db.query(models.Part).filter(models.Part.id == part_id).first()
    if not part:
        raise NotFoundError(f"Part {part_id} not found.")
    return part


def _check_available(part: models.Part, requested: int) -> None:
    if settings.ALLOW_NEGATIVE_STOCK:
        return
    if part.quantity - requested < 0:
        raise ConflictError(
            f"Insufficient stock for part {part.reference}: {part.quantity} available, {requested} requested."
        )


def _move_stock(db: Session, part: models.Part, delta: int) -> int:
    """Apply `delta` to the stored quantity and return the new balance."""
    previous = part.quantity
    query = db.query(models.Part).filter(models.Part.id == part.id)
    if delta < 0 and not settings.ALLOW_NEGATIVE_STOCK:
        query = query.filter(models.Part.quantity + delta >= 0)
    updated = query.update(
        {models.Part.quantity: models.Part.quantity + delta},
        synchronize_session=False
    )
    if not updated:
        raise ConflictError(f"Insufficient stock for part {part.reference}.")
    db.flush()
    db.refresh(part, attribute_names=["quantity"])

    # Only the transition into low stock raises an alert
    if delta < 0 and previous > part.min_quantity >= part.quantity:
        raise_low_stock_alert(db, part)
    return part.quantity


def _ensure_open(work_order: models.WorkOrder) -> None:
    if work_order.status in models.CLOSED_WORK_ORDER_STATUSES:
        raise ConflictError(
            f"Work order {work_order.id} is {work_order.status.value}; its parts can no longer change."
        )


def attach_part(
    db: Session, work_order_id: int, part_id: int, quantity: int, unit_price: Optional[float] = None
) -> models.PartUsed:
    """Record part consumption on a work order and take it out of stock."""
    work_order = db.query(models.WorkOrder).filter(models.WorkOrder.id == work_order_id).first()
    if not work_order:
        raise NotFoundError(f"Work order {work_order_id} not found.")
    _ensure_open(work_order)

    part = get_part(db, part_id)
    _check_available(part, quantity)

    try:
        part_used = models.PartUsed(
            work_order_id=work_order.id,
            part_id=part.id,
            quantity=quantity,
            unit_price=part.unit_price if unit_price is None else unit_price,
        )
        db.add(part_used)
        balance = _move_stock(db, part, -quantity)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(part_used)
    logger.info(
        f"Attached {quantity} x {part.reference} to work order {work_order.id} (stock now {balance})"
    )
    return part_used


def detach_part(db: Session, part_used_id: int) -> bool:
    """Remove a usage line and return its quantity to stock. Missing rows are a no-op."""
    part_used = db.query(models.PartUsed).filter(models.PartUsed.id == part_used_id).first()
    if not part_used:
        logger.debug(f"Part usage {part_used_id} already gone, nothing to detach")
        return False

    try:
        part = get_part(db, part_used.part_id)
        balance = _move_stock(db, part, part_used.quantity)
        db.delete(part_used)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Detached usage {part_used_id}, {part.reference} stock back to {balance}")
    return True


def update_part_usage(db: Session, part_used_id: int, quantity: int) -> models.PartUsed:
    """Change the quantity on a usage line, moving only the difference through stock."""
    part_used = db.query(models.PartUsed).filter(models.PartUsed.id == part_used_id).first()
    if not part_used:
        raise NotFoundError(f"Part usage {part_used_id} not found.")
    _ensure_open(part_used.work_order)

    part = get_part(db, part_used.part_id)
    extra = quantity - part_used.quantity
    if extra == 0:
        return part_used
    if extra > 0:
        _check_available(part, extra)

    try:
        part_used.quantity = quantity
        _move_stock(db, part, -extra)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(part_used)
    logger.info(f"Usage {part_used_id} now {quantity} x {part.reference}")
    return part_used


def release_work_order_parts(db: Session, work_order: models.WorkOrder) -> int:
    """Return every part on the work order to stock. Runs in the caller's transaction."""
    released = 0
    for part_used in list(work_order.parts_used):
        part = get_part(db, part_used.part_id)
        _move_stock(db, part, part_used.quantity)
        db.delete(part_used)
        released += 1
    return released


def adjust_stock(db: Session, part_id: int, quantity_change: int, reason: Optional[str] = None) -> models.Part:
    """Manual restock or write-off."""
    part = get_part(db, part_id)
    if quantity_change < 0:
        _check_available(part, -quantity_change)

    try:
        balance = _move_stock(db, part, quantity_change)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(part)
    logger.info(
        f"Stock of {part.reference} adjusted by {quantity_change:+d} to {balance}"
        + (f" ({reason})" if reason else "")
    )
    return part


def list_low_stock(db: Session) -> List[models.Part]:
    return db.query(models.Part).filter(
        models.Part.quantity <= models.Part.min_quantity
    ).order_by(models.Part.quantity.asc(), models.Part.id.asc()).all()


def list_usages_for_work_order(db: Session, work_order_id: int) -> List[models.PartUsed]:
    if not db.query(models.WorkOrder.id).filter(models.WorkOrder.id == work_order_id).first():
        raise NotFoundError(f"Work order {work_order_id} not found.")
    return db.query(models.PartUsed).filter(
        models.PartUsed.work_order_id == work_order_id
    ).order_by(models.PartUsed.id.asc()).all()
