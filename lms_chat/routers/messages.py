# lms_chat/routers/messages.py
from typing import List
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..core.database import get_db
from ..core.exceptions import DatabaseError, InvalidUser
from ..schemas.chat_schemas import MarkReadRequest, MessageRecord
from ..services.chat_service import ChatService
from ..services.identity_service import IdentityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/messages", tags=["Messages"])

@router.put("/mark-read")
async def mark_read(request: MarkReadRequest, db: AsyncSession = Depends(get_db)):
    """Mark every unread message addressed to the user in this chat as read"""
    try:
        user_id = await IdentityService(db).resolve(request.user_firebase_uid)
        if not user_id:
            raise InvalidUser()
        updated = await ChatService(db).mark_read(request.chat_id, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Mark Read Error: {e}")
        await db.rollback()
        raise DatabaseError(str(e))

    logger.debug(f"Marked {updated} messages read in chat {request.chat_id}")
    return Response(status_code=200)

@router.get("/{chat_id}", response_model=List[MessageRecord])
async def get_messages(chat_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    """Chat history oldest first, with attachment download URLs"""
    settings = request.app.state.settings

    try:
        rows = await ChatService(db).get_history(chat_id)
    except SQLAlchemyError as e:
        logger.error(f"History Error: {e}")
        raise DatabaseError(str(e))

    return [
        MessageRecord(
            **row._mapping,
            attachment_url=settings.attachment_url(row.attachment_file_id),
        )
        for row in rows
    ]
