# lms_chat/routers/files.py
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..core.database import get_db
from ..core.exceptions import DatabaseError, FileNotFound, FileTooLarge, NoFileUploaded
from ..services.file_service import FileService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Attachments"])

CHUNK_SIZE = 1024 * 1024


async def read_limited(upload: UploadFile, limit: int) -> bytes:
    """Read the upload, refusing anything past the byte limit"""
    chunks = []
    size = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise FileTooLarge(limit)
        chunks.append(chunk)
    return b"".join(chunks)


def content_disposition(filename: str) -> str:
    """Inline disposition that survives non-latin names and embedded quotes"""
    fallback = "".join(
        ch if 32 <= ord(ch) < 127 and ch not in '"\\' else "_" for ch in filename
    )
    header = f'inline; filename="{fallback}"'
    if fallback != filename:
        header += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return header


@router.post("/upload")
async def upload_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db)
):
    """Store a single attachment sent as multipart field 'file'"""
    if file is None:
        raise NoFileUploaded()

    data = await read_limited(file, request.app.state.settings.max_upload_bytes)
    service = FileService(db)

    try:
        file_id = await service.store(
            filename=file.filename or "upload",
            mime_type=file.content_type or "application/octet-stream",
            data=data,
        )
    except SQLAlchemyError as e:
        logger.error(f"Upload Error: {e}")
        await db.rollback()
        raise DatabaseError("File upload failed")

    return {"file_id": file_id}


@router.get("/files/{file_id}")
async def get_file(file_id: int, db: AsyncSession = Depends(get_db)):
    """Serve attachment bytes inline with the original type and name"""
    service = FileService(db)

    try:
        stored = await service.get(file_id)
    except SQLAlchemyError as e:
        logger.error(f"File Serve Error: {e}")
        raise DatabaseError("Error serving file")

    if stored is None:
        raise FileNotFound()

    return Response(
        content=stored.data,
        media_type=stored.mime_type,
        headers={"Content-Disposition": content_disposition(stored.filename)},
    )
