from sqlalchemy.orm import as_declarative
from sqlalchemy.orm import mapped_column
from sqlalchemy import DateTime, func


@as_declarative()
class Base:
    __abstract__ = True  # Prevents creating a table for the base class

    # Each table names its own integer primary key (user_id, chat_id, ...)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
