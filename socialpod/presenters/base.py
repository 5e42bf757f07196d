from datetime import datetime, timezone
from typing import Any, Optional


def api_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC; naive values (as read back from SQLite) are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class BasePresenter:
    """Wraps a model and exposes its attributes, so presenters read like the model."""

    def __init__(self, presentable: Any):
        self.presentable = presentable

    def __getattr__(self, name: str) -> Any:
        return getattr(self.presentable, name)
