# models/timestamps.py
from datetime import datetime, timezone
from typing import Optional

def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Backend timestamps without an offset are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
