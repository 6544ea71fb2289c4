# lms_chat/schemas/chat_schemas.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CreateChatRequest(BaseModel):
    student_firebase_uid: str
    instructor_firebase_uid: str


class ChatCreatedResponse(BaseModel):
    chat_id: int
    is_new: bool = Field(serialization_alias="isNew")


class ChatSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    chat_id: int
    created_at: Optional[datetime] = None
    recipient_name: Optional[str] = None
    recipient_uid: Optional[str] = None
    unread_count: int = 0


class MessageRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: int
    text: str
    created_at: Optional[datetime] = None
    is_read: bool
    sender_uid: str
    attachment_file_id: Optional[int] = None
    attachment_name: Optional[str] = None
    attachment_type: Optional[str] = None
    attachment_url: Optional[str] = None


class MarkReadRequest(BaseModel):
    chat_id: int
    user_firebase_uid: str
