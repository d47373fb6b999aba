from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pairwatch.db.models import PriceAlertRecord
from pairwatch.domain.enums import AlertDirection
from pairwatch.domain.models import AlertIdentity, PriceAlert


class AlertRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, alert: PriceAlert) -> None:
        self._session.add(
            PriceAlertRecord(
                symbol=alert.symbol,
                target_price=alert.target_price,
                alert_type=alert.direction.value,
                is_enabled=alert.enabled,
                created_at=alert.created_at,
                message=alert.message,
            )
        )
        await self._session.flush()

    async def list(self, enabled_only: bool = True) -> list[PriceAlert]:
        stmt = select(PriceAlertRecord).order_by(PriceAlertRecord.created_at.asc(), PriceAlertRecord.id.asc())
        if enabled_only:
            stmt = stmt.where(PriceAlertRecord.is_enabled.is_(True))
        result = await self._session.execute(stmt)
        return [self._to_domain(r) for r in result.scalars().all()]

    async def exists(
        self, symbol: str, target_price: Decimal, direction: AlertDirection, enabled: bool = True
    ) -> bool:
        result = await self._session.execute(
            select(PriceAlertRecord.id)
            .where(
                PriceAlertRecord.symbol == symbol,
                PriceAlertRecord.target_price == target_price,
                PriceAlertRecord.alert_type == direction.value,
                PriceAlertRecord.is_enabled.is_(enabled),
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def delete(self, identity: AlertIdentity) -> int:
        result = await self._session.execute(delete(PriceAlertRecord).where(*self._match(identity)))
        return result.rowcount or 0

    async def set_enabled(self, identity: AlertIdentity, enabled: bool) -> int:
        result = await self._session.execute(
            update(PriceAlertRecord).where(*self._match(identity)).values({PriceAlertRecord.is_enabled: enabled})
        )
        return result.rowcount or 0

    async def clear(self) -> int:
        result = await self._session.execute(delete(PriceAlertRecord))
        return result.rowcount or 0

    @staticmethod
    def _match(identity: AlertIdentity) -> tuple:
        symbol, target_price, direction, created_at = identity
        return (
            PriceAlertRecord.symbol == symbol,
            PriceAlertRecord.target_price == target_price,
            PriceAlertRecord.alert_type == AlertDirection(direction).value,
            PriceAlertRecord.created_at == created_at,
        )

    @staticmethod
    def _to_domain(record: PriceAlertRecord) -> PriceAlert:
        return PriceAlert(
            symbol=record.symbol,
            target_price=record.target_price,
            direction=record.direction,
            enabled=record.is_enabled,
            created_at=record.created_at,
            message=record.message,
        )
