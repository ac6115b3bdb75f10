"""
Migration CLI

    python -m listing_optimizer.db up       Run pending migrations
    python -m listing_optimizer.db status   Show applied and pending migrations
"""
import argparse
import asyncio
import logging
import sys

from ..config import Config
from .base import create_engine
from .migrations import migrate, status

logger = logging.getLogger("listing_optimizer.db")


async def run(command: str, database_url: str) -> int:
    engine = create_engine(database_url)
    try:
        if command == "up":
            applied = await migrate(engine)
            print(f"Applied {len(applied)} migration(s)" if applied else "No pending migrations")
        else:
            applied, pending = await status(engine)
            print("Migration Status:")
            print(f"Executed: {len(applied)}")
            for name in applied:
                print(f"   {name}")
            if pending:
                print(f"Pending: {len(pending)}")
                for name in pending:
                    print(f"  - {name}")
            else:
                print("All migrations up to date")
    finally:
        await engine.dispose()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="python -m listing_optimizer.db", description="Database migration runner")
    parser.add_argument("command", nargs="?", default="up", choices=["up", "status"])
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    args = parser.parse_args(argv)

    settings = Config()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return asyncio.run(run(args.command, args.database_url or settings.DATABASE_URL))
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
