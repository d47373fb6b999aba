"""In-place schema setup and favorites upgrade, without a migration framework.

Every step is safe to repeat: base tables are created only when absent and each enriched
favorites column is added only when the live table lacks it. If the upgrade sequence fails
outright the favorites table is dropped and recreated with the full schema (saved favorites
are lost on that path). If even that fails the Store runs in degraded, symbol-only mode.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from pairwatch.db.models import (
    ENRICHED_FAVORITE_COLUMNS,
    FAVORITES_TABLE,
    EnrichedColumn,
    FavoriteRecord,
    HistoricalPriceRecord,
    PriceAlertRecord,
    SettingRecord,
    basic_favorites,
)
from pairwatch.db.session import Base
from pairwatch.domain.enums import StoreMode
from pairwatch.exceptions import SchemaMigrationFailure

logger = logging.getLogger(__name__)

BASE_TABLES = [
    HistoricalPriceRecord.__table__,
    PriceAlertRecord.__table__,
    SettingRecord.__table__,
]


def _column_names(sync_conn, table_name: str) -> set[str]:
    return {col["name"].lower() for col in inspect(sync_conn).get_columns(table_name)}


class SchemaManager:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def initialize(self) -> StoreMode:
        """Create base tables, upgrade favorites, and report which mode the Store can run in."""
        await self.create_base_tables()
        try:
            added = await self.upgrade_favorites()
        except SchemaMigrationFailure as exc:
            logger.warning("Favorites migration failed (%s); recreating table with full schema", exc)
            try:
                await self.recreate_favorites()
            except SQLAlchemyError:
                logger.exception("Failed to recreate Favorites table, continuing in degraded mode")
                return StoreMode.DEGRADED
            return StoreMode.ENRICHED

        if added:
            logger.info("Favorites migration added columns: %s", ", ".join(added))
        return StoreMode.ENRICHED

    async def create_base_tables(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=BASE_TABLES)
            await conn.run_sync(basic_favorites.create, checkfirst=True)

    async def upgrade_favorites(self) -> list[str]:
        """Run every ensure-column step. Raises SchemaMigrationFailure if any step errors."""
        added: list[str] = []
        try:
            for column in ENRICHED_FAVORITE_COLUMNS:
                if await self.ensure_favorite_column(column):
                    added.append(column.name)
        except SQLAlchemyError as exc:
            raise SchemaMigrationFailure(str(exc)) from exc
        return added

    async def ensure_favorite_column(self, column: EnrichedColumn) -> bool:
        """Add one enriched column if missing. Returns True when the column was added."""
        async with self._engine.begin() as conn:
            existing = await conn.run_sync(_column_names, FAVORITES_TABLE)
            if column.name.lower() in existing:
                return False
            try:
                await conn.execute(text(f'ALTER TABLE "{FAVORITES_TABLE}" ADD COLUMN "{column.name}" {column.ddl}'))
            except OperationalError as exc:
                if "duplicate column" in str(exc).lower():
                    return False
                raise
        logger.info("Added %s column to %s table", column.name, FAVORITES_TABLE)
        return True

    async def missing_favorite_columns(self) -> list[str]:
        async with self._engine.connect() as conn:
            existing = await conn.run_sync(_column_names, FAVORITES_TABLE)
        return [c.name for c in ENRICHED_FAVORITE_COLUMNS if c.name.lower() not in existing]

    async def recreate_favorites(self) -> None:
        async with self._engine.begin() as conn:
            await conn.execute(text(f'DROP TABLE IF EXISTS "{FAVORITES_TABLE}"'))
            await conn.run_sync(FavoriteRecord.__table__.create)
        logger.warning("Recreated %s table with full schema; previously saved favorites were dropped", FAVORITES_TABLE)

    async def drop_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all, tables=BASE_TABLES)
            await conn.execute(text(f'DROP TABLE IF EXISTS "{FAVORITES_TABLE}"'))
