# socialpod/api/__init__.py
# This file makes the api directory a Python package.

from . import aspects
from . import auth
from . import notifications
from . import photos
from . import posts
from . import users

__all__ = [
    "aspects",
    "auth",
    "notifications",
    "photos",
    "posts",
    "users",
]
