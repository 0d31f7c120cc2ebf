# fleetos/services/fuel.py

import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from fleetos import models, schemas
from fleetos.exceptions import NotFoundError
from fleetos.utils import apply_changes

logger = logging.getLogger(__name__)


def calculate_fuel_consumption(quantity: Optional[float], distance: Optional[float]) -> Optional[float]:
    """Litres per 100 km, rounded to two decimals. None when either input is zero or missing."""
    if not quantity or not distance:
        return None
    return round(quantity / distance * 100, 2)


def consumption_by_record(records: List[models.FuelRecord]) -> dict:
    """
    Full-tank method over one vehicle's records.

    Each full-tank fill is measured against the previous full-tank fill with
    a lower odometer reading. Partial fills in between add their litres to
    the next full-tank measurement. Returns {record_id: consumption or None}.
    """
    ordered = sorted(records, key=lambda r: (r.mileage, r.date, r.id))
    result = {}
    baseline = None
    litres_since_baseline = 0.0

    for record in ordered:
        result[record.id] = None
        if not record.full_tank:
            litres_since_baseline += record.quantity
            continue

        if baseline is not None and record.mileage > baseline.mileage and record.date >= baseline.date:
            result[record.id] = calculate_fuel_consumption(
                litres_since_baseline + record.quantity,
                record.mileage - baseline.mileage
            )
        baseline = record
        litres_since_baseline = 0.0

    return result


def get_fuel_record(db: Session, record_id: int) -> models.FuelRecord:
    record = db.query(models.FuelRecord).filter(models.FuelRecord.id == record_id).first()
    if not record:
        raise NotFoundError("Fuel record not found")
    return record


def list_fuel_records(
    db: Session,
    vehicle_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 100,
    offset: int = 0,
):
    query = db.query(models.FuelRecord)
    if vehicle_id is not None:
        query = query.filter(models.FuelRecord.vehicle_id == vehicle_id)
    if start_date:
        query = query.filter(models.FuelRecord.date >= start_date)
    if end_date:
        query = query.filter(models.FuelRecord.date <= end_date)
    total = query.count()
    items = query.order_by(
        models.FuelRecord.date.desc(), models.FuelRecord.id.desc()
    ).offset(offset).limit(limit).all()
    return items, total


def vehicle_fuel_history(db: Session, vehicle_id: int) -> List[schemas.FuelRecordWithConsumption]:
    if not db.query(models.Vehicle.id).filter(models.Vehicle.id == vehicle_id).first():
        raise NotFoundError(f"Vehicle {vehicle_id} not found.")

    records = db.query(models.FuelRecord).filter(
        models.FuelRecord.vehicle_id == vehicle_id
    ).order_by(models.FuelRecord.date.desc(), models.FuelRecord.id.desc()).all()

    consumption = consumption_by_record(records)
    return [
        schemas.FuelRecordWithConsumption.model_validate(record).model_copy(
            update={"consumption": consumption[record.id]}
        )
        for record in records
    ]


def _advance_odometer(vehicle: models.Vehicle, mileage: int) -> None:
    # The odometer never goes backwards
    if mileage > (vehicle.mileage or 0):
        logger.debug(f"Vehicle {vehicle.id} mileage {vehicle.mileage} -> {mileage}")
        vehicle.mileage = mileage


def create_fuel_record(db: Session, record_data: schemas.FuelRecordCreate) -> models.FuelRecord:
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.id == record_data.vehicle_id).first()
    if not vehicle:
        raise NotFoundError(f"Vehicle {record_data.vehicle_id} not found.")

    record = models.FuelRecord(**record_data.model_dump())
    db.add(record)
    _advance_odometer(vehicle, record.mileage)
    db.commit()
    db.refresh(record)
    logger.info(f"Fuel record {record.id}: {record.quantity} L for vehicle {vehicle.id} at {record.mileage} km")
    return record


def update_fuel_record(db: Session, record_id: int, changes: dict) -> models.FuelRecord:
    record = get_fuel_record(db, record_id)
    apply_changes(record, changes)
    if changes.get("mileage") is not None:
        _advance_odometer(record.vehicle, record.mileage)
    db.commit()
    db.refresh(record)
    return record


def delete_fuel_record(db: Session, record_id: int) -> None:
    record = get_fuel_record(db, record_id)
    db.delete(record)
    db.commit()
    logger.info(f"Deleted fuel record {record_id}")
