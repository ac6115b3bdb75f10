"""
ORM tables: optimization history and the schema migration ledger
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Optimization(Base):
    """One optimize call: the scraped listing and its AI rewrite (immutable)"""

    __tablename__ = "optimizations"
    __table_args__ = (Index("ix_optimizations_asin_created_at", "asin", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    asin: Mapped[str] = mapped_column(String(10), nullable=False)
    original_title: Mapped[str] = mapped_column(Text, nullable=False)
    # JSON-encoded string lists
    original_bullets: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    original_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    optimized_title: Mapped[str] = mapped_column(Text, nullable=False)
    optimized_bullets: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    optimized_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    suggested_keywords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class SchemaMigration(Base):
    """Append-only ledger of applied migrations"""

    __tablename__ = "schema_migrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
