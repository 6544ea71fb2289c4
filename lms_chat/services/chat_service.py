# lms_chat/services/chat_service.py
from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_, or_, case, desc, func
from sqlalchemy.engine import Row
from sqlalchemy.orm import aliased
from .base_service import BaseService
from ..models.chat import Chat
from ..models.message import Message
from ..models.user import User
from ..models.file import StoredFile


class ChatService(BaseService[Chat]):
    def __init__(self, db: AsyncSession):
        super().__init__(Chat, db)

    async def list_chats(self, user_id: int) -> List[Row]:
        """All chats involving the user, newest first, with counterpart and unread count"""
        student = aliased(User)
        instructor = aliased(User)
        is_student = Chat.student_id == user_id

        unread_count = (
            select(func.count(Message.message_id))
            .where(
                and_(
                    Message.chat_id == Chat.chat_id,
                    Message.receiver_id == user_id,
                    Message.is_read == False,
                )
            )
            .correlate(Chat)
            .scalar_subquery()
        )

        stmt = (
            select(
                Chat.chat_id,
                Chat.created_at,
                case((is_student, instructor.full_name), else_=student.full_name).label("recipient_name"),
                case((is_student, instructor.firebase_uid), else_=student.firebase_uid).label("recipient_uid"),
                unread_count.label("unread_count"),
            )
            .join(student, Chat.student_id == student.user_id)
            .join(instructor, Chat.instructor_id == instructor.user_id)
            .where(or_(Chat.student_id == user_id, Chat.instructor_id == user_id))
            .order_by(desc(Chat.created_at), desc(Chat.chat_id))
        )
        result = await self.db.execute(stmt)
        return list(result.all())

    async def get_or_create_chat(self, student_id: int, instructor_id: int) -> Tuple[int, bool]:
        """Get the chat for this (student, instructor) pair or create it.

        The lookup and the insert are separate round trips, so two concurrent
        callers for the same pair can both insert.
        """
        stmt = select(Chat.chat_id).where(
            and_(
                Chat.student_id == student_id,
                Chat.instructor_id == instructor_id,
            )
        ).order_by(Chat.chat_id).limit(1)
        result = await self.db.execute(stmt)
        chat_id = result.scalar_one_or_none()
        if chat_id is not None:
            return chat_id, False

        chat = await self.create({"student_id": student_id, "instructor_id": instructor_id})
        return chat.chat_id, True

    async def get_history(self, chat_id: int) -> List[Row]:
        """Messages of a chat in creation order, with sender uid and attachment metadata"""
        stmt = (
            select(
                Message.message_id,
                Message.text,
                Message.created_at,
                Message.is_read,
                User.firebase_uid.label("sender_uid"),
                Message.attachment_file_id,
                StoredFile.filename.label("attachment_name"),
                StoredFile.mime_type.label("attachment_type"),
            )
            .join(User, Message.sender_id == User.user_id)
            .outerjoin(StoredFile, Message.attachment_file_id == StoredFile.file_id)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at, Message.message_id)
        )
        result = await self.db.execute(stmt)
        return list(result.all())

    async def save_message(
        self,
        chat_id: int,
        sender_id: int,
        receiver_id: int,
        text: str,
        attachment_file_id: Optional[int] = None,
    ) -> Message:
        """Persist a new unread message"""
        message = Message(
            chat_id=chat_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text or "",
            is_read=False,
            attachment_file_id=attachment_file_id,
        )
        self.db.add(message)
        await self.db.commit()
        await self.db.refresh(message)
        return message

    async def mark_read(self, chat_id: int, user_id: int) -> int:
        """Flip unread messages addressed to the user; returns how many changed"""
        stmt = update(Message).where(
            and_(
                Message.chat_id == chat_id,
                Message.receiver_id == user_id,
                Message.is_read == False,
            )
        ).values(is_read=True)

        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    async def mark_all_read(self) -> int:
        """Maintenance: mark every message in the store as read"""
        result = await self.db.execute(update(Message).values(is_read=True))
        await self.db.commit()
        return result.rowcount
