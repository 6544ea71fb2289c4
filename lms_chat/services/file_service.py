# lms_chat/services/file_service.py
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .base_service import BaseService
from ..models.file import StoredFile


class FileService(BaseService[StoredFile]):
    """Attachments are write-once: there is no update or delete."""

    def __init__(self, db: AsyncSession):
        super().__init__(StoredFile, db)

    async def store(self, filename: str, mime_type: str, data: bytes) -> int:
        stored = StoredFile(filename=filename, mime_type=mime_type, data=data)
        self.db.add(stored)
        await self.db.commit()
        return stored.file_id

    async def get_metadata(self, file_id: int) -> Optional[Tuple[str, str]]:
        stmt = select(StoredFile.filename, StoredFile.mime_type).where(StoredFile.file_id == file_id)
        result = await self.db.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        return row.filename, row.mime_type
