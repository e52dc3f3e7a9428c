import uuid
from datetime import datetime


def new_id() -> str:
    return str(uuid.uuid4())


def iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None
