# lms_chat/routers/chats.py
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..core.database import get_db
from ..core.exceptions import DatabaseError, UserNotFound, UsersNotFound
from ..schemas.chat_schemas import ChatCreatedResponse, ChatSummary, CreateChatRequest
from ..services.chat_service import ChatService
from ..services.identity_service import IdentityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/chats", tags=["Chats"])

@router.get("", response_model=List[ChatSummary])
async def list_chats(
    firebase_uid: str = Query(...),
    db: AsyncSession = Depends(get_db)
):
    """Chats involving the user, newest first, with unread counts"""
    try:
        user_id = await IdentityService(db).resolve(firebase_uid)
        if not user_id:
            raise UserNotFound()
        rows = await ChatService(db).list_chats(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Chat List Error: {e}")
        raise DatabaseError("Server Error")

    return [ChatSummary.model_validate(row) for row in rows]

@router.post("", response_model=ChatCreatedResponse)
async def create_or_get_chat(request: CreateChatRequest, db: AsyncSession = Depends(get_db)):
    """Return the student/instructor chat, creating it on first contact"""
    try:
        student_id, instructor_id = await IdentityService(db).resolve_pair(
            request.student_firebase_uid, request.instructor_firebase_uid
        )
        if not student_id or not instructor_id:
            raise UsersNotFound()
        chat_id, is_new = await ChatService(db).get_or_create_chat(student_id, instructor_id)
    except SQLAlchemyError as e:
        logger.error(f"Chat Create Error: {e}")
        await db.rollback()
        raise DatabaseError(str(e))

    return ChatCreatedResponse(chat_id=chat_id, is_new=is_new)
