# lms_chat/models/__init__.py
"""Import all models here so Base.metadata is complete for Alembic and startup migrations."""
from .base import Base
from .user import User
from .file import StoredFile
from .chat import Chat
from .message import Message

__all__ = ["Base", "User", "StoredFile", "Chat", "Message"]
