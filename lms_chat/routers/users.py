# lms_chat/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..core.database import get_db
from ..core.exceptions import DatabaseError, UserNotFound
from ..schemas.user_schemas import SaveFcmTokenRequest, SyncUserRequest, SyncUserResponse
from ..services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Users"])

@router.post("/sync-user", response_model=SyncUserResponse)
async def sync_user(request: SyncUserRequest, db: AsyncSession = Depends(get_db)):
    """Create the user on first sign-in, refresh email and name afterwards"""
    service = UserService(db)

    try:
        user_id, role = await service.sync_user(
            firebase_uid=request.firebase_uid,
            email=request.email,
            full_name=request.full_name,
            role=request.role,
        )
    except SQLAlchemyError as e:
        logger.error(f"Sync Error: {e}")
        await db.rollback()
        raise DatabaseError(str(e))

    return SyncUserResponse(user_id=user_id, role=role)

@router.post("/save-fcm-token")
async def save_fcm_token(request: SaveFcmTokenRequest, db: AsyncSession = Depends(get_db)):
    """Register the device push token for a user"""
    service = UserService(db)

    try:
        user_id = await service.identity.resolve(request.firebase_uid)
        if not user_id:
            raise UserNotFound()
        await service.save_fcm_token(user_id, request.fcm_token)
    except SQLAlchemyError as e:
        logger.error(f"FCM Token Error: {e}")
        await db.rollback()
        raise DatabaseError(str(e))

    return {"success": True}
