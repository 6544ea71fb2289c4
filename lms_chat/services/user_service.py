# lms_chat/services/user_service.py
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from .base_service import BaseService
from .identity_service import IdentityService
from ..models.user import User

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserService(BaseService[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(User, db)
        self.identity = IdentityService(db)

    async def sync_user(
        self,
        firebase_uid: str,
        email: Optional[str],
        full_name: Optional[str],
        role: Optional[str],
    ) -> Tuple[int, Optional[str]]:
        """Insert the user or refresh email/name; role and status are kept on conflict"""
        insert = _UPSERT_DIALECTS.get(self.dialect_name)
        if insert is None:
            raise NotImplementedError(f"Upsert not supported for dialect {self.dialect_name}")

        stmt = insert(User).values(
            firebase_uid=firebase_uid,
            email=email,
            full_name=full_name,
            role=role,
            status="active",
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.firebase_uid],
            set_={"email": stmt.excluded.email, "full_name": stmt.excluded.full_name},
        ).returning(User.user_id, User.role)

        result = await self.db.execute(stmt)
        row = result.one()
        await self.db.commit()
        return row.user_id, row.role

    async def save_fcm_token(self, user_id: int, fcm_token: Optional[str]) -> None:
        await self.db.execute(
            update(User).where(User.user_id == user_id).values(fcm_token=fcm_token)
        )
        await self.db.commit()

    async def get_fcm_token(self, user_id: int) -> Optional[str]:
        result = await self.db.execute(select(User.fcm_token).where(User.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_display_name(self, user_id: int) -> Optional[str]:
        result = await self.db.execute(select(User.full_name).where(User.user_id == user_id))
        return result.scalar_one_or_none()
