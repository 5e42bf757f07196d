from .person_presenter import PersonPresenter
from .photo_presenter import PhotoPresenter
from .post_presenter import PostPresenter
from .notification_presenter import NotificationPresenter

__all__ = ["PersonPresenter", "PhotoPresenter", "PostPresenter", "NotificationPresenter"]
