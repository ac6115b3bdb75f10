"""
Optimization history repository
Insert-only store with point and list lookups
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..errors import StorageUnavailable
from ..models import (
    ListingTitle,
    OptimizationRecord,
    OptimizationSummary,
    OptimizedListing,
    ProductListing,
)
from ..utils.validators import validate_asin
from ..utils.parsing import dump_json_list, safe_json_list
from .tables import Optimization

logger = logging.getLogger(__name__)

# Connection-level failures; constraint or programming errors still propagate
STORAGE_ERRORS = (OperationalError, InterfaceError, OSError)


def to_record(row: Optimization) -> OptimizationRecord:
    return OptimizationRecord(
        id=row.id,
        asin=row.asin,
        original=ProductListing(
            title=row.original_title or "",
            bullets=safe_json_list(row.original_bullets),
            description=row.original_description or "",
        ),
        optimized=OptimizedListing(
            title=row.optimized_title or "",
            bullets=safe_json_list(row.optimized_bullets),
            description=row.optimized_description or "",
            keywords=safe_json_list(row.suggested_keywords),
        ),
        createdAt=row.created_at,
    )


def to_summary(row) -> OptimizationSummary:
    return OptimizationSummary(
        id=row.id,
        asin=row.asin,
        original=ListingTitle(title=row.original_title or ""),
        createdAt=row.created_at,
    )


class OptimizationRepository:
    """Persists before/after pairs; no update or delete path"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    def _storage_error(self, operation: str, error: Exception) -> StorageUnavailable:
        logger.error(f"Database {operation} failed: {error}")
        return StorageUnavailable(f"Database {operation} failed: {error}")

    async def save(self, asin: str, original: ProductListing, optimized: OptimizedListing) -> int:
        """
        Insert one optimization
        Args:
            asin: Validated ASIN
            original: Scraped listing
            optimized: AI rewrite
        Returns:
            Generated optimization id
        """
        validate_asin(asin)
        row = Optimization(
            asin=asin,
            original_title=original.title,
            original_bullets=dump_json_list(original.bullets),
            original_description=original.description,
            optimized_title=optimized.title,
            optimized_bullets=dump_json_list(optimized.bullets),
            optimized_description=optimized.description,
            suggested_keywords=dump_json_list(optimized.keywords),
        )
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    session.add(row)
                    await session.flush()
                    optimization_id = row.id
        except STORAGE_ERRORS as e:
            raise self._storage_error("insert", e) from e

        logger.info(f"Optimization saved with ID: {optimization_id}")
        return optimization_id

    async def get_by_id(self, optimization_id: int) -> Optional[OptimizationRecord]:
        try:
            async with self.session_factory() as session:
                row = await session.get(Optimization, optimization_id)
        except STORAGE_ERRORS as e:
            raise self._storage_error("lookup", e) from e
        return to_record(row) if row else None

    async def list_by_asin(self, asin: str) -> List[OptimizationSummary]:
        """Summaries for one ASIN, newest first"""
        stmt = (
            select(Optimization.id, Optimization.asin, Optimization.original_title, Optimization.created_at)
            .where(Optimization.asin == asin)
            .order_by(Optimization.created_at.desc(), Optimization.id.desc())
        )
        return await self._summaries(stmt)

    async def list_all(self, limit: int = 10, offset: int = 0) -> List[OptimizationSummary]:
        """Summaries page, ascending by id"""
        stmt = (
            select(Optimization.id, Optimization.asin, Optimization.original_title, Optimization.created_at)
            .order_by(Optimization.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return await self._summaries(stmt)

    async def _summaries(self, stmt) -> List[OptimizationSummary]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except STORAGE_ERRORS as e:
            raise self._storage_error("query", e) from e
        return [to_summary(row) for row in rows]
