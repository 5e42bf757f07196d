# socialpod/models/__init__.py
# Import models in dependency order
from .user import User
from .person import Person, Profile
from .aspect import Aspect, Contact, AspectMembership
from .post import Post, Like, Comment, post_aspects
from .photo import Photo, photo_aspects
from .notification import Notification, NotificationType, notification_actors

__all__ = [
    "User",
    "Person",
    "Profile",
    "Aspect",
    "Contact",
    "AspectMembership",
    "Post",
    "Like",
    "Comment",
    "post_aspects",
    "Photo",
    "photo_aspects",
    "Notification",
    "NotificationType",
    "notification_actors",
]
