# lms_chat/models/message.py
from typing import Optional
from sqlalchemy import Integer, Text, Boolean, ForeignKey, Index, false
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base

class Message(Base):
    __tablename__ = "messages"

    message_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    chat_id: Mapped[int] = mapped_column(ForeignKey("chats.chat_id"), nullable=False, index=True)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    attachment_file_id: Mapped[Optional[int]] = mapped_column(ForeignKey("files.file_id"), nullable=True)

    # Relationships
    chat = relationship("Chat", back_populates="messages")
    attachment = relationship("StoredFile")

    __table_args__ = (
        Index('idx_message_chat_time', 'chat_id', 'created_at'),
        Index('idx_message_unread', 'chat_id', 'receiver_id', 'is_read'),
    )
