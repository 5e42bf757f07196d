import uuid
from datetime import datetime, timezone


def generate_guid() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
