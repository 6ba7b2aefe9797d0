from __future__ import annotations

from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from database.repositories import (
    AchievementRepositoryDB,
    CourseRepositoryDB,
    RoundRepositoryDB,
    TournamentRepositoryDB,
    UserRepositoryDB,
)

logger = structlog.get_logger(__name__)


class DatabaseManager:
    """
    Single handle to every repository, sharing one asyncpg pool.

    Routers receive this through ``api.dependencies.get_db`` and never touch
    the pool directly.
    """

    def __init__(self, pool: asyncpg.Pool, schema_path: Optional[str] = None) -> None:
        self.pool = pool
        self.schema_path = Path(
            schema_path or Path(__file__).with_name("schema.sql")
        ).resolve()
        self.courses = CourseRepositoryDB(pool)
        self.tournaments = TournamentRepositoryDB(pool)
        self.rounds = RoundRepositoryDB(pool)
        self.users = UserRepositoryDB(pool)
        self.achievements = AchievementRepositoryDB(pool)

    async def initialize_schema(self) -> None:
        """Apply schema.sql. Every statement is idempotent."""
        sql = self.schema_path.read_text(encoding="utf-8")
        async with self.pool.acquire() as conn:
            await conn.execute(sql)
        logger.info("schema_initialized", path=str(self.schema_path))
