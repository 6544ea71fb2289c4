# lms_chat/models/chat.py
from sqlalchemy import Integer, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base

class Chat(Base):
    __tablename__ = "chats"

    chat_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False, index=True)
    instructor_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False, index=True)

    # Relationships
    student = relationship("User", foreign_keys=[student_id])
    instructor = relationship("User", foreign_keys=[instructor_id])
    messages = relationship("Message", back_populates="chat")

    # Lookup index only: one chat per pair is enforced by get-or-create, not the schema
    __table_args__ = (
        Index('idx_chat_pair', 'student_id', 'instructor_id'),
    )
