from typing import Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from pairwatch.db.models import SettingRecord


class SettingRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> Optional[str]:
        result = await self._session.execute(select(SettingRecord.value).where(SettingRecord.key == key))
        return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        await self._session.execute(insert(SettingRecord).prefix_with("OR REPLACE").values(key=key, value=value))

    async def delete(self, key: str) -> bool:
        result = await self._session.execute(delete(SettingRecord).where(SettingRecord.key == key))
        return bool(result.rowcount)

    async def all(self) -> dict[str, str]:
        result = await self._session.execute(select(SettingRecord).order_by(SettingRecord.key))
        return {r.key: r.value for r in result.scalars().all()}
