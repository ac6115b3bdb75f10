"""
Schema migration runner

Migrations are applied in name order, each in its own transaction, and
recorded in the append-only ``schema_migrations`` ledger; re-running is a
no-op.
"""
import logging
from typing import Callable, List, Tuple

from sqlalchemy import inspect, insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from .tables import Optimization, SchemaMigration

logger = logging.getLogger(__name__)


def _create_schema_migrations(conn: Connection):
    SchemaMigration.__table__.create(conn, checkfirst=True)


def _create_optimizations(conn: Connection):
    # Also creates ix_optimizations_asin_created_at
    Optimization.__table__.create(conn, checkfirst=True)


MIGRATIONS: List[Tuple[str, Callable[[Connection], None]]] = [
    ("001_create_schema_migrations", _create_schema_migrations),
    ("002_create_optimizations", _create_optimizations),
]


def _ledger_exists(conn: Connection) -> bool:
    return inspect(conn).has_table(SchemaMigration.__tablename__)


async def applied_migrations(engine: AsyncEngine) -> List[str]:
    async with engine.connect() as conn:
        if not await conn.run_sync(_ledger_exists):
            return []
        result = await conn.execute(select(SchemaMigration.name).order_by(SchemaMigration.id))
        return [row[0] for row in result]


async def pending_migrations(engine: AsyncEngine) -> List[str]:
    applied = set(await applied_migrations(engine))
    return [name for name, _ in MIGRATIONS if name not in applied]


async def migrate(engine: AsyncEngine) -> List[str]:
    """
    Apply pending migrations
    Args:
        engine: Async engine for the target database
    Returns:
        Names of the migrations applied by this run (empty when up to date)
    """
    pending = await pending_migrations(engine)
    if not pending:
        logger.info("No pending migrations")
        return []

    logger.info(f"Found {len(pending)} pending migration(s)")
    steps = dict(MIGRATIONS)
    for name in pending:
        logger.info(f"  Running: {name}")
        try:
            async with engine.begin() as conn:
                await conn.run_sync(steps[name])
                await conn.execute(insert(SchemaMigration).values(name=name))
        except Exception:
            logger.error(f"Failed: {name}")
            raise
        logger.info(f"Success: {name}")

    logger.info("All migrations completed successfully")
    return pending


async def status(engine: AsyncEngine) -> Tuple[List[str], List[str]]:
    """Return (applied, pending) migration names"""
    applied = await applied_migrations(engine)
    pending = [name for name, _ in MIGRATIONS if name not in set(applied)]
    return applied, pending
