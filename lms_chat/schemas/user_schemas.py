# lms_chat/schemas/user_schemas.py
from typing import Optional
from pydantic import BaseModel


class SyncUserRequest(BaseModel):
    firebase_uid: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None


class SyncUserResponse(BaseModel):
    user_id: int
    role: Optional[str] = None


class SaveFcmTokenRequest(BaseModel):
    firebase_uid: str
    fcm_token: Optional[str] = None
