import secrets
from calendar import monthrange
from datetime import datetime

def unique_string(byte_length: int = 32) -> str:
    """
    Generates a URL-safe unique string.
    """
    return secrets.token_urlsafe(byte_length)

def subtract_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month `months` earlier, clamped to the target month's last day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)

def apply_changes(instance, changes: dict) -> None:
    """setattr each change, skipping explicit nulls aimed at NOT NULL columns."""
    columns = instance.__table__.columns
    for key, value in changes.items():
        if value is None and key in columns and not columns[key].nullable:
            continue
        setattr(instance, key, value)
