"""
Persistence: async engine, ORM tables, repository and migrations
"""
from .base import Base, create_engine, create_session_factory, ping
from .tables import Optimization, SchemaMigration
from .repository import OptimizationRepository
from .migrations import MIGRATIONS, migrate, status

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "ping",
    "Optimization",
    "SchemaMigration",
    "OptimizationRepository",
    "MIGRATIONS",
    "migrate",
    "status",
]
