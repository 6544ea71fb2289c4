# lms_chat/services/identity_service.py
"""Translates external (Firebase) identities into internal user ids."""
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ..models.user import User


class IdentityService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, firebase_uid: Optional[str]) -> Optional[int]:
        """Return the internal user id, or None when no user matches. Never cached."""
        if not firebase_uid:
            return None
        stmt = select(User.user_id).where(User.firebase_uid == firebase_uid)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def resolve_pair(
        self, first_uid: Optional[str], second_uid: Optional[str]
    ) -> Tuple[Optional[int], Optional[int]]:
        return await self.resolve(first_uid), await self.resolve(second_uid)
