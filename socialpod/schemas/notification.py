from typing import Optional

from pydantic import BaseModel


class NotificationUpdate(BaseModel):
    read: Optional[bool] = None
