import asyncpg
import structlog
from typing import Optional

logger = structlog.get_logger(__name__)


class DatabasePool:
    """Manages the asyncpg connection pool lifecycle.

    One instance is created per application and kept on ``app.state``.
    """

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
    ) -> None:
        """Create the connection pool. Call once at app startup."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
        )
        logger.info("database_pool_created", min_size=min_size, max_size=max_size)

    async def close(self) -> None:
        """Close all connections. Call at app shutdown."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("database_pool_closed")

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the pool, raising if not initialized."""
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await initialize() first."
            )
        return self._pool

    async def health_check(self) -> bool:
        """Test connectivity with SELECT 1."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (OSError, RuntimeError, asyncpg.PostgresError) as e:
            logger.warning("database_health_check_failed", error=str(e))
            return False
