from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import EmailInUse
from .models import User as UserModel

SORTABLE_FIELDS = {
    "name": UserModel.name,
    "created_at": UserModel.created_at,
}


class UserRepository:
    """Persistence for user records on top of an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: str) -> Optional[UserModel]:
        result = await self.db.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.db.execute(select(UserModel).where(UserModel.email == email))
        return result.scalar_one_or_none()

    async def save(self, user: UserModel) -> UserModel:
        """
        Inserts or updates the record and commits.
        The unique index on email is the final guard: a duplicate that slipped past
        the service pre-check is reported as EmailInUse.
        """
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise EmailInUse() from exc
        await self.db.refresh(user)
        return user

    async def delete(self, user: UserModel) -> None:
        await self.db.delete(user)
        await self.db.commit()

    async def query_filtered(
        self,
        role: Optional[str] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> List[UserModel]:
        column = SORTABLE_FIELDS[sort_by]
        query = select(UserModel)
        if role is not None:
            query = query.where(UserModel.role == role)
        primary = column.desc() if order == "desc" else column.asc()
        # id breaks ties so equal sort keys come back in a stable order
        query = query.order_by(primary, UserModel.id.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def query_older_than_or_null(self, threshold: datetime) -> List[UserModel]:
        result = await self.db.execute(
            select(UserModel)
            .where(or_(UserModel.last_login.is_(None), UserModel.last_login < threshold))
            .order_by(UserModel.name.asc(), UserModel.id.asc())
        )
        return list(result.scalars().all())
