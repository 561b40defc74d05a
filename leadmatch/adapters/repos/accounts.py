# leadmatch/adapters/repos/accounts.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import Buyer, Marketer, UserSession, UserType


class AccountRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_buyer(self, buyer_id: int) -> Buyer | None:
        return await self.session.get(Buyer, buyer_id)

    async def get_marketer(self, marketer_id: int) -> Marketer | None:
        return await self.session.get(Marketer, marketer_id)

    async def find_buyer(self, *, email: str | None = None, phone: str | None = None) -> Buyer | None:
        """First buyer whose email OR phone matches."""
        conds = []
        if email:
            conds.append(Buyer.email == email)
        if phone:
            conds.append(Buyer.phone == phone)
        if not conds:
            return None
        q = select(Buyer).where(or_(*conds)).order_by(Buyer.id.asc())
        return (await self.session.execute(q)).scalars().first()

    async def find_marketer(self, *, email: str | None = None, phone: str | None = None) -> Marketer | None:
        conds = []
        if email:
            conds.append(Marketer.email == email)
        if phone:
            conds.append(Marketer.phone == phone)
        if not conds:
            return None
        q = select(Marketer).where(or_(*conds)).order_by(Marketer.id.asc())
        return (await self.session.execute(q)).scalars().first()

    async def add(self, obj: Buyer | Marketer) -> None:
        self.session.add(obj)
        await self.session.flush()

    # ---- sessions ----

    async def add_session(
        self,
        *,
        token_hash: str,
        user_type: UserType,
        user_id: int,
        expires_at: datetime,
    ) -> UserSession:
        row = UserSession(
            token_hash=token_hash,
            user_type=user_type,
            user_id=user_id,
            created_at=datetime.utcnow(),
            expires_at=expires_at,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_session_by_hash(self, token_hash: str) -> UserSession | None:
        q = select(UserSession).where(UserSession.token_hash == token_hash)
        return (await self.session.execute(q)).scalars().first()

    async def delete_session(self, token_hash: str) -> int:
        res = await self.session.execute(delete(UserSession).where(UserSession.token_hash == token_hash))
        return int(res.rowcount or 0)
