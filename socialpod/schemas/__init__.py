# socialpod/schemas/__init__.py

# Auth schemas
from .auth import Token, TokenData, RegisterRequest, LoginRequest

# Post schemas
from .post import PostCreate, CommentCreate

# Aspect schemas
from .aspect import AspectCreate, AspectResponse, ContactAdd

# Notification schemas
from .notification import NotificationUpdate

__all__ = [
    "Token",
    "TokenData",
    "RegisterRequest",
    "LoginRequest",
    "PostCreate",
    "CommentCreate",
    "AspectCreate",
    "AspectResponse",
    "ContactAdd",
    "NotificationUpdate",
]
