# lms_chat/services/base_service.py
"""Base service with common lookups."""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Type, Any, Optional, TypeVar, Generic

# Define generic type
T = TypeVar('T')

class BaseService(Generic[T]):
    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any) -> Optional[T]:
        return await self.db.get(self.model, id)

    async def create(self, obj_in: dict) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    @property
    def dialect_name(self) -> str:
        return self.db.bind.dialect.name
